"""
Runtime values and the numeric type lattice for ZR#.

A Value is an immutable tagged union. ERROR is an ordinary variant that
carries a message: operations that fail return it instead of raising, and
every caller checks is_error before doing more work.

Promotion lattice: INT32 < INT64 < FLOAT. The legacy INT tag behaves like
INT64.

Author: xwest
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple

from ..lexer.tokens import SourceLocation
from ..parser.ast_nodes import DeclaredType


INT32_MIN = -2 ** 31
INT32_MAX = 2 ** 31 - 1
INT64_MIN = -2 ** 63
INT64_MAX = 2 ** 63 - 1

VOID_RENDERING = "void"


class ValueType(Enum):
    """Runtime type tags."""
    INT32 = "int32"
    INT64 = "int64"
    INT = "int"          # legacy tag, treated as INT64
    FLOAT = "float"
    BOOL = "bool"
    STRING = "string"
    VOID = "void"
    ERROR = "error"


INTEGER_TYPES = frozenset({ValueType.INT32, ValueType.INT64, ValueType.INT})
NUMERIC_TYPES = INTEGER_TYPES | {ValueType.FLOAT}

DECLARED_TO_VALUE_TYPE = {
    DeclaredType.INT32: ValueType.INT32,
    DeclaredType.INT64: ValueType.INT64,
    DeclaredType.FLOAT: ValueType.FLOAT,
    DeclaredType.BOOL: ValueType.BOOL,
    DeclaredType.STRING: ValueType.STRING,
}


@dataclass(frozen=True)
class Value:
    """
    A runtime value.

    payload holds an int for the integer types, a float for FLOAT, a bool
    for BOOL, a str for STRING, None for VOID, and the message for ERROR.
    """
    type: ValueType
    payload: Any = None
    code: Optional[str] = None                  # ERROR only
    location: Optional[SourceLocation] = None   # ERROR only

    # Constructors

    @staticmethod
    def int32(value: int) -> "Value":
        return Value(ValueType.INT32, value)

    @staticmethod
    def int64(value: int) -> "Value":
        return Value(ValueType.INT64, value)

    @staticmethod
    def float_(value: float) -> "Value":
        return Value(ValueType.FLOAT, float(value))

    @staticmethod
    def bool_(value: bool) -> "Value":
        return Value(ValueType.BOOL, bool(value))

    @staticmethod
    def string(value: str) -> "Value":
        return Value(ValueType.STRING, value)

    @staticmethod
    def error(message: str, code: Optional[str] = None,
              location: Optional[SourceLocation] = None) -> "Value":
        return Value(ValueType.ERROR, message, code, location)

    # Queries

    @property
    def is_error(self) -> bool:
        return self.type == ValueType.ERROR

    @property
    def is_numeric(self) -> bool:
        return self.type in NUMERIC_TYPES

    @property
    def message(self) -> Optional[str]:
        """Error message, None for non-error values."""
        return self.payload if self.is_error else None

    def render(self) -> str:
        """Text written by `print`."""
        if self.type == ValueType.FLOAT:
            return f"{self.payload:.2f}"
        if self.type == ValueType.BOOL:
            return "true" if self.payload else "false"
        if self.type == ValueType.STRING:
            return self.payload
        if self.type in INTEGER_TYPES:
            return str(self.payload)
        if self.type == ValueType.VOID:
            return VOID_RENDERING
        return f"<error: {self.payload}>"

    def __str__(self) -> str:
        return f"{self.type.value}({self.render()})"


VOID = Value(ValueType.VOID)


def wrap_int64(value: int) -> int:
    """Two's complement wrap into the signed 64-bit range."""
    value &= 0xFFFFFFFFFFFFFFFF
    if value > INT64_MAX:
        value -= 2 ** 64
    return value


def fits_int32(value: int) -> bool:
    return INT32_MIN <= value <= INT32_MAX


def promote_pair(left: Value, right: Value) -> Optional[Tuple[Value, Value]]:
    """
    Bring two numeric operands to their common type.

    INT32 and legacy INT widen to INT64; if either side is FLOAT both become
    FLOAT. Returns None when either operand is not numeric.
    """
    if not (left.is_numeric and right.is_numeric):
        return None

    if left.type == ValueType.FLOAT or right.type == ValueType.FLOAT:
        return Value.float_(left.payload), Value.float_(right.payload)

    return Value.int64(left.payload), Value.int64(right.payload)


def convert_to(value: Value, target: ValueType) -> Tuple[Optional[Value], Optional[str]]:
    """
    Convert a value for a declared `let` type.

    Returns (converted, None) on success or (None, reason) on failure.
    Reason is "overflow" for an out-of-range INT64 -> INT32 narrowing and
    "mismatch" for every other refused conversion.
    """
    if value.type == target:
        return value, None

    source = value.type

    if target == ValueType.INT64 and source in (ValueType.INT32, ValueType.INT):
        return Value.int64(value.payload), None

    if target == ValueType.FLOAT and source in INTEGER_TYPES:
        return Value.float_(value.payload), None

    if target == ValueType.INT32 and source in (ValueType.INT64, ValueType.INT):
        if fits_int32(value.payload):
            return Value.int32(value.payload), None
        return None, "overflow"

    return None, "mismatch"
