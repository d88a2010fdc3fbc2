"""
Error handling for ZR# module inclusion.

Every module failure is fatal: a missing target, a duplicate or cyclic
include, or an unreadable file stops the whole run.

Author: xwest
"""

from typing import List, Optional

from ..diagnostics import FatalError
from ..lexer.tokens import SourceLocation


class ModuleError(FatalError):
    """Raised when a `loadin` target cannot be resolved, loaded or read."""

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        path: Optional[str] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message, location, code, help_text, suggestions)
        self.path = path


MODULE_ERROR_CODES = {
    "M001": "Module not found",
    "M002": "Duplicate or circular include",
    "M003": "Module could not be read",
    "M004": "Module path too long",
}


def create_module_not_found_error(target: str, tried: List[str],
                                  location: Optional[SourceLocation]) -> ModuleError:
    return ModuleError(
        message=f"Module '{target}' not found",
        location=location,
        path=target,
        code="M001",
        help_text="Searched, in order:",
        suggestions=tried
    )


def create_duplicate_module_error(path: str, currently_loading: bool,
                                  location: Optional[SourceLocation]) -> ModuleError:
    if currently_loading:
        message = f"Circular include of '{path}'"
        help_text = "The module is still being loaded further up the include chain."
    else:
        message = f"Module '{path}' is already loaded"
        help_text = "A module may be included only once per run, even along separate include paths."

    return ModuleError(
        message=message,
        location=location,
        path=path,
        code="M002",
        help_text=help_text
    )


def create_module_read_error(path: str, reason: str,
                             location: Optional[SourceLocation]) -> ModuleError:
    return ModuleError(
        message=f"Could not read module '{path}': {reason}",
        location=location,
        path=path,
        code="M003"
    )


def create_path_too_long_error(target: str, limit: int,
                               location: Optional[SourceLocation]) -> ModuleError:
    return ModuleError(
        message=f"Module path '{target[:40]}...' exceeds {limit} characters",
        location=location,
        path=target,
        code="M004"
    )
