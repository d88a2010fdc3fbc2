"""
Module registry: the canonical paths loaded (or being loaded) in a run.

A path is registered before its file is even read, so revisiting a module
that is still loading is detected as a cycle straight away.

Author: xwest
"""

import logging
from enum import Enum
from typing import Dict, List, Optional

from ..diagnostics import create_capacity_error
from ..lexer.tokens import SourceLocation
from .errors import create_duplicate_module_error

logger = logging.getLogger(__name__)


class ModuleState(Enum):
    LOADING = "loading"
    LOADED = "loaded"


class ModuleRegistry:
    """Ordered set of canonical module paths with a fixed capacity."""

    def __init__(self, capacity: int = 64):
        self.capacity = capacity
        self._modules: Dict[str, ModuleState] = {}

    def register(self, path: str, location: Optional[SourceLocation] = None):
        """
        Record a canonical path as loading.

        Raises:
            ModuleError: if the path is already registered (M002)
            CapacityError: if the registry is full (C002)
        """
        state = self._modules.get(path)
        if state is not None:
            raise create_duplicate_module_error(path, state == ModuleState.LOADING, location)

        if len(self._modules) >= self.capacity:
            raise create_capacity_error("C002", self.capacity, location, f"cannot load '{path}'")

        self._modules[path] = ModuleState.LOADING
        logger.info("registered module %s", path)

    def mark_loaded(self, path: str):
        if path in self._modules:
            self._modules[path] = ModuleState.LOADED

    def state(self, path: str) -> Optional[ModuleState]:
        return self._modules.get(path)

    def paths(self) -> List[str]:
        """Registered paths in registration order."""
        return list(self._modules)

    def clear(self):
        self._modules.clear()

    def __contains__(self, path: str) -> bool:
        return path in self._modules

    def __len__(self) -> int:
        return len(self._modules)
