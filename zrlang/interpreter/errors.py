"""
Runtime error values for the ZR# evaluator.

Runtime failures are not exceptions: each helper below returns an ERROR
Value carrying a code, a message and the location of the node that
failed. to_diagnostic() turns one into a Diagnostic for reporting.

Author: xwest
"""

from typing import Optional

from ..diagnostics import Diagnostic
from ..lexer.tokens import SourceLocation
from .values import Value, ValueType


RUNTIME_ERROR_CODES = {
    "R001": "Type mismatch",
    "R002": "Division by zero",
    "R003": "Undefined variable",
    "R004": "Narrowing overflow",
    "R005": "Declared type mismatch",
    "R006": "Unsupported construct",
    "R007": "Integer literal out of range",
    "R008": "Condition is not a bool",
}


def create_type_mismatch_error(operator: str, left: Value, right: Value,
                               location: Optional[SourceLocation]) -> Value:
    return Value.error(
        f"Type mismatch: cannot apply '{operator}' to {left.type.value} and {right.type.value}",
        "R001", location
    )


def create_division_by_zero_error(location: Optional[SourceLocation]) -> Value:
    return Value.error("Division by zero", "R002", location)


def create_undefined_variable_error(name: str, location: Optional[SourceLocation]) -> Value:
    return Value.error(f"Undefined variable '{name}'", "R003", location)


def create_narrowing_overflow_error(value: Value, target: ValueType,
                                    location: Optional[SourceLocation]) -> Value:
    return Value.error(
        f"Value {value.payload} does not fit in {target.value}",
        "R004", location
    )


def create_declared_type_error(name: str, value: Value, target: ValueType,
                               location: Optional[SourceLocation]) -> Value:
    return Value.error(
        f"Cannot assign {value.type.value} to '{name}' declared as {target.value}",
        "R005", location
    )


def create_unsupported_node_error(what: str, location: Optional[SourceLocation]) -> Value:
    return Value.error(f"{what} is not supported", "R006", location)


def create_literal_range_error(text: str, location: Optional[SourceLocation]) -> Value:
    return Value.error(f"Integer literal {text} is out of the int64 range", "R007", location)


def create_condition_type_error(value: Value, location: Optional[SourceLocation]) -> Value:
    return Value.error(
        f"Condition must be a bool, got {value.type.value}",
        "R008", location
    )


def to_diagnostic(error: Value) -> Diagnostic:
    """Build a Diagnostic from an ERROR value."""
    help_text = RUNTIME_ERROR_CODES.get(error.code) if error.code else None
    return Diagnostic(
        message=error.message,
        location=error.location,
        severity="error",
        code=error.code,
        help_text=help_text
    )
