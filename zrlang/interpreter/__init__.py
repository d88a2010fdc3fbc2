"""
ZR# Interpreter Package

Tree-walking evaluation of ZR# programs:
- Runtime values with an INT32 < INT64 < FLOAT promotion lattice
- Error-as-value propagation (no exceptions for runtime failures)
- Declared-type conversions on `let` (widening, checked narrowing)
- One flat, fixed-capacity symbol table

Author: xwest
"""

from .values import Value, ValueType, VOID, promote_pair, convert_to
from .symbol_table import SymbolTable, Symbol
from .evaluator import Evaluator, ProgramResult
from .errors import RUNTIME_ERROR_CODES, to_diagnostic

__all__ = [
    # Evaluation
    "Evaluator", "ProgramResult",

    # Values and the type lattice
    "Value", "ValueType", "VOID", "promote_pair", "convert_to",

    # Symbol management
    "SymbolTable", "Symbol",

    # Error handling
    "RUNTIME_ERROR_CODES", "to_diagnostic",
]
