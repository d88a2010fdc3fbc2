"""
ZR# Interpreter Package

A tree-walking interpreter for ZR#, a small statically-annotated scripting
language with `let`, `if`/`else`, `print` and `loadin` module inclusion.

Architecture:
    zrlang/
    ├── lexer/           # Tokenization and lexical analysis
    ├── parser/          # Syntax analysis and AST ownership
    ├── interpreter/     # Values, symbol table and evaluation
    ├── modules/         # loadin resolution, registry and loading
    ├── session.py       # Per-run state
    └── cli.py           # `zr` command

Author: xwest
License: MIT
"""

__version__ = "0.1.0"
__author__ = "xwest"
__license__ = "MIT"

# lexer before diagnostics: diagnostics imports lexer.tokens
from .lexer import Lexer, LexerError
from .config import InterpreterConfig, DEFAULT_CONFIG
from .diagnostics import Diagnostic, FatalError, CapacityError
from .parser import Parser, ParseError
from .interpreter import Evaluator, Value, ValueType
from .modules import ModuleError, ModuleLoader, ModuleResolver
from .session import Session, RunResult

__all__ = [
    # Core classes
    "Lexer",
    "Parser",
    "Evaluator",
    "ModuleLoader",
    "ModuleResolver",
    "Session",
    "RunResult",
    "Value",
    "ValueType",

    # Configuration
    "InterpreterConfig",
    "DEFAULT_CONFIG",

    # Errors
    "Diagnostic",
    "FatalError",
    "CapacityError",
    "LexerError",
    "ParseError",
    "ModuleError",

    # Version info
    "__version__",
    "__author__",
    "__license__",
]
