"""
Shared diagnostic records for the ZR# toolchain.

Every stage that can abort a run (lexer, parser, module loader, capacity
checks) raises a subclass of FatalError. Each one carries a Diagnostic so
the driver can render the failure the same way regardless of where it
happened.

Author: xwest
"""

from typing import Optional, List
from dataclasses import dataclass

from .lexer.tokens import SourceLocation


@dataclass
class Diagnostic:
    """A single error/warning record with optional location and hints."""
    message: str
    location: Optional[SourceLocation]
    severity: str  # "error", "warning", "info"
    code: Optional[str] = None
    help_text: Optional[str] = None
    suggestions: Optional[List[str]] = None

    def __str__(self) -> str:
        severity_prefix = self.severity.upper()
        if self.code:
            severity_prefix += f"[{self.code}]"
        result = f"{severity_prefix}: {self.message}\n"

        if self.location is not None:
            result += f"  --> {self.location}\n"

        if self.help_text:
            result += f"  help: {self.help_text}\n"

        if self.suggestions:
            result += "  suggestions:\n"
            for suggestion in self.suggestions:
                result += f"    - {suggestion}\n"

        return result


class FatalError(Exception):
    """
    Base class for errors that abort the whole run.

    Lexer, parser, module and capacity failures all derive from this so a
    single driver can catch them and decide how to exit.
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.message = message
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )

    @property
    def code(self) -> Optional[str]:
        return self.diagnostic.code

    @property
    def location(self) -> Optional[SourceLocation]:
        return self.diagnostic.location

    def __str__(self) -> str:
        return str(self.diagnostic)


class CapacityError(FatalError):
    """A fixed limit (symbols, modules, block statements, nesting) overflowed."""
    pass


CAPACITY_ERROR_CODES = {
    "C001": "Symbol table full",
    "C002": "Module registry full",
    "C003": "Too many statements in block",
    "C004": "Nesting too deep",
}


def create_capacity_error(code: str, limit: int,
                          location: Optional[SourceLocation] = None,
                          detail: Optional[str] = None) -> CapacityError:
    """Create a capacity error for one of the C00x codes."""
    what = CAPACITY_ERROR_CODES.get(code, "Capacity exceeded")
    message = f"{what} (limit {limit})"
    if detail:
        message += f": {detail}"

    return CapacityError(
        message=message,
        location=location,
        code=code,
        help_text="Raise the corresponding limit in InterpreterConfig or split the program."
    )
