"""
ZR# module system.

Key Features:
- `loadin` resolution: including directory, then `<root>/files/`, then absolute
- Canonical paths via realpath, so symlinks and `..` spellings collapse
- Registry with cycle and duplicate detection before any file is read
- Depth-first eager loading ahead of the including file's statements

Author: xwest
"""

from .errors import ModuleError, MODULE_ERROR_CODES
from .registry import ModuleRegistry, ModuleState
from .resolver import ModuleResolver, ResolutionContext
from .loader import ModuleLoader

__all__ = [
    'ModuleError', 'MODULE_ERROR_CODES',
    'ModuleRegistry', 'ModuleState',
    'ModuleResolver', 'ResolutionContext',
    'ModuleLoader',
]
