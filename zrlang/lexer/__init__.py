"""
ZR# Lexer Package

Turns ZR# source text into a pull-based stream of tokens.

Key Features:
- Single next_token() operation, one token per call
- Keyword table covering statements, literals and type names
- Greedy longest-match operators (==, !=, <=, >=, &&, ||)
- Fatal diagnostics for invalid characters and unterminated strings
- Source location tracking (line, column) for every token

Author: xwest
"""

from .tokens import Token, TokenType, SourceLocation
from .lexer import Lexer, tokenize_string, tokenize_file
from .errors import LexerError

__all__ = [
    "Lexer",
    "Token",
    "TokenType",
    "SourceLocation",
    "LexerError",
    "tokenize_string",
    "tokenize_file",
]
