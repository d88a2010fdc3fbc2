"""
Token definitions for the ZR# lexer.

This module defines all token types supported by ZR#, including:
- Keywords (statements, literals, reserved words and type names)
- Operators (arithmetic, comparison, logical)
- Literals (numbers and strings)
- Punctuation and delimiters

Author: xwest
"""

from enum import Enum, auto
from dataclasses import dataclass


class TokenType(Enum):
    """
    Enumeration of all token types in ZR#.

    Organized by category for clarity and maintainability.
    """

    # ========================================================================
    # Special Tokens
    # ========================================================================
    EOF = auto()                    # End of input

    # ========================================================================
    # Literals and Identifiers
    # ========================================================================
    NUMBER = auto()                 # 42, 3.14
    STRING = auto()                 # "hello"
    IDENTIFIER = auto()             # variable_name

    # ========================================================================
    # Keywords
    # ========================================================================
    LET = auto()                    # let
    IF = auto()                     # if
    ELSE = auto()                   # else
    WHILE = auto()                  # while (reserved)
    PRINT = auto()                  # print
    FUNC = auto()                   # func (reserved)
    RETURN = auto()                 # return (reserved)
    TRUE = auto()                   # true
    FALSE = auto()                  # false
    AND = auto()                    # and
    OR = auto()                     # or
    NOT = auto()                    # not
    LOADIN = auto()                 # loadin (source inclusion)

    # Type keywords
    TYPE_INT = auto()               # int (alias for int64)
    TYPE_INT32 = auto()             # int32
    TYPE_INT64 = auto()             # int64
    TYPE_FLOAT = auto()             # float
    TYPE_BOOL = auto()              # bool
    TYPE_STRING = auto()            # string

    # ========================================================================
    # Operators
    # ========================================================================
    PLUS = auto()                   # +
    MINUS = auto()                  # -
    MULTIPLY = auto()               # *
    DIVIDE = auto()                 # /

    ASSIGN = auto()                 # =
    EQUAL = auto()                  # ==
    NOT_EQUAL = auto()              # !=
    LESS_THAN = auto()              # <
    GREATER_THAN = auto()           # >
    LESS_EQUAL = auto()             # <=
    GREATER_EQUAL = auto()          # >=

    LOGICAL_AND = auto()            # &&
    LOGICAL_OR = auto()             # ||
    LOGICAL_NOT = auto()            # !

    # ========================================================================
    # Punctuation and Delimiters
    # ========================================================================
    LEFT_PAREN = auto()             # (
    RIGHT_PAREN = auto()            # )
    LEFT_BRACE = auto()             # {
    RIGHT_BRACE = auto()            # }
    SEMICOLON = auto()              # ;
    COMMA = auto()                  # ,
    COLON = auto()                  # :


@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in the source code.

    Used for error reporting and debugging information.
    """
    filename: str
    line: int
    column: int
    offset: int  # Character offset from start of file

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"

    def __repr__(self) -> str:
        return f"SourceLocation({self.filename!r}, {self.line}, {self.column}, {self.offset})"


@dataclass(frozen=True)
class Token:
    """
    Represents a lexical token in the ZR# language.

    The lexeme is the token's text payload: operator spelling, identifier
    name, number text, or string contents without the quotes.
    """
    type: TokenType
    lexeme: str
    location: SourceLocation

    def __str__(self) -> str:
        return f"{self.type.name}({self.lexeme!r})"

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.lexeme!r}, {self.location!r})"

    @property
    def is_literal(self) -> bool:
        """Check if this token is a literal value."""
        return self.type in LITERAL_TOKENS

    @property
    def is_keyword(self) -> bool:
        """Check if this token is a keyword."""
        return self.type in KEYWORD_TOKENS

    @property
    def is_type_keyword(self) -> bool:
        """Check if this token names a type in an annotation."""
        return self.type in TYPE_KEYWORDS.values()

    @property
    def is_binary_operator(self) -> bool:
        """Check if this token can continue an expression as an infix operator."""
        return self.type in BINARY_OPERATORS


# Lookup tables used by the lexer and parser

STATEMENT_KEYWORDS = {
    "let": TokenType.LET,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "while": TokenType.WHILE,
    "print": TokenType.PRINT,
    "func": TokenType.FUNC,
    "return": TokenType.RETURN,
    "loadin": TokenType.LOADIN,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    "and": TokenType.AND,
    "or": TokenType.OR,
    "not": TokenType.NOT,
}

TYPE_KEYWORDS = {
    "int": TokenType.TYPE_INT,
    "int32": TokenType.TYPE_INT32,
    "int64": TokenType.TYPE_INT64,
    "float": TokenType.TYPE_FLOAT,
    "bool": TokenType.TYPE_BOOL,
    "string": TokenType.TYPE_STRING,
}

KEYWORDS = {**STATEMENT_KEYWORDS, **TYPE_KEYWORDS}

KEYWORD_TOKENS = frozenset(KEYWORDS.values())

# Longest spellings are tried first by the lexer
OPERATORS = {
    "==": TokenType.EQUAL,
    "!=": TokenType.NOT_EQUAL,
    "<=": TokenType.LESS_EQUAL,
    ">=": TokenType.GREATER_EQUAL,
    "&&": TokenType.LOGICAL_AND,
    "||": TokenType.LOGICAL_OR,

    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.MULTIPLY,
    "/": TokenType.DIVIDE,
    "=": TokenType.ASSIGN,
    "!": TokenType.LOGICAL_NOT,
    "<": TokenType.LESS_THAN,
    ">": TokenType.GREATER_THAN,

    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    ";": TokenType.SEMICOLON,
    ",": TokenType.COMMA,
    ":": TokenType.COLON,
}

LITERAL_TOKENS = frozenset({
    TokenType.NUMBER, TokenType.STRING, TokenType.TRUE, TokenType.FALSE,
})

# Infix operators and the spelling stored on the BinaryOp node
BINARY_OPERATORS = {
    TokenType.PLUS: "+",
    TokenType.MINUS: "-",
    TokenType.MULTIPLY: "*",
    TokenType.DIVIDE: "/",
    TokenType.EQUAL: "==",
    TokenType.NOT_EQUAL: "!=",
    TokenType.LESS_THAN: "<",
    TokenType.GREATER_THAN: ">",
    TokenType.LESS_EQUAL: "<=",
    TokenType.GREATER_EQUAL: ">=",
    TokenType.LOGICAL_AND: "&&",
    TokenType.LOGICAL_OR: "||",
    TokenType.AND: "&&",
    TokenType.OR: "||",
}
