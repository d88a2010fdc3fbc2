"""
Error handling for the ZR# parser.

The parser has no error recovery: the first malformed construct raises a
ParseError and the run stops. The helpers below build errors with codes,
help text and suggestions.

Author: xwest
"""

from typing import Optional, List, Union

from ..lexer.tokens import Token, TokenType, SourceLocation, TYPE_KEYWORDS
from ..lexer.errors import ErrorRecovery
from ..diagnostics import FatalError


class ParseError(FatalError):
    """
    Exception raised when the parser encounters a syntax error.

    Keeps the offending token when one is available.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation,
        token: Optional[Token] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message, location, code, help_text, suggestions)
        self.token = token


TOKEN_DISPLAY = {
    TokenType.EOF: "end of input",
    TokenType.NUMBER: "number",
    TokenType.STRING: "string literal",
    TokenType.IDENTIFIER: "identifier",
    TokenType.LEFT_PAREN: "'('",
    TokenType.RIGHT_PAREN: "')'",
    TokenType.LEFT_BRACE: "'{'",
    TokenType.RIGHT_BRACE: "'}'",
    TokenType.ASSIGN: "'='",
    TokenType.COLON: "':'",
    TokenType.SEMICOLON: "';'",
}


def describe_token(token: Token) -> str:
    """Human readable description of a token for messages."""
    if token.type in (TokenType.IDENTIFIER, TokenType.NUMBER):
        return f"{TOKEN_DISPLAY[token.type]} '{token.lexeme}'"
    if token.type == TokenType.STRING:
        return f'string literal "{token.lexeme}"'
    if token.type in TOKEN_DISPLAY:
        return TOKEN_DISPLAY[token.type]
    return f"'{token.lexeme}'"


def _describe_expected(expected: Union[TokenType, str]) -> str:
    if isinstance(expected, TokenType):
        return TOKEN_DISPLAY.get(expected, expected.name)
    return expected


SUGGESTIONS = {
    TokenType.RIGHT_PAREN: ["Add a closing parenthesis ')'"],
    TokenType.RIGHT_BRACE: ["Add a closing brace '}'"],
    TokenType.LEFT_BRACE: ["Add an opening brace '{' to start a block"],
    TokenType.LEFT_PAREN: ["Wrap the condition in parentheses: if (cond) { ... }"],
    TokenType.ASSIGN: ["Add an assignment operator '='"],
}


# Common parser error codes for categorization
PARSER_ERROR_CODES = {
    "P001": "Unexpected token",
    "P005": "Invalid expression",
    "P007": "Invalid type annotation",
    "P012": "Mismatched delimiters",
    "P013": "loadin requires a string literal",
    "P014": "Unsupported construct",
}


def create_unexpected_token_error(expected: Union[TokenType, str], found: Token) -> ParseError:
    """Create an error for an unexpected token."""
    expected_str = _describe_expected(expected)
    found_str = describe_token(found)
    code = "P012" if expected in (TokenType.RIGHT_PAREN, TokenType.RIGHT_BRACE) else "P001"

    return ParseError(
        message=f"Expected {expected_str}, found {found_str}",
        location=found.location,
        token=found,
        code=code,
        help_text=f"The parser expected to see {expected_str} at this position.",
        suggestions=SUGGESTIONS.get(expected, []) if isinstance(expected, TokenType) else []
    )


def create_invalid_expression_error(found: Token) -> ParseError:
    """Create an error for a token that cannot start an expression."""
    return ParseError(
        message=f"Invalid expression: unexpected {describe_token(found)}",
        location=found.location,
        token=found,
        code="P005",
        help_text="An expression starts with a name, a number, a string, true/false or '('.",
        suggestions=["Check the expression syntax", "Ensure all operators have operands"]
    )


def create_invalid_type_error(found: Token) -> ParseError:
    """Create an error for an unknown type name in an annotation."""
    return ParseError(
        message=f"Invalid type annotation: {describe_token(found)}",
        location=found.location,
        token=found,
        code="P007",
        help_text="Valid types are int, int32, int64, float, bool and string.",
        suggestions=[
            f"Did you mean '{name}'?"
            for name in ErrorRecovery.suggest_keyword_corrections(found.lexeme, TYPE_KEYWORDS)
        ]
    )


def create_loadin_target_error(found: Token) -> ParseError:
    """Create an error for a loadin that is not followed by a string."""
    return ParseError(
        message=f"loadin expects a string literal, found {describe_token(found)}",
        location=found.location,
        token=found,
        code="P013",
        help_text='Write the module path in quotes, without the extension: loadin "utils"'
    )


def create_unsupported_construct_error(found: Token) -> ParseError:
    """Create an error for reserved keywords whose constructs are not implemented."""
    return ParseError(
        message=f"'{found.lexeme}' is reserved and not supported yet",
        location=found.location,
        token=found,
        code="P014",
        help_text="Functions, return and while loops are reserved words in this version of ZR#."
    )
