"""
ZR# Lexer - turns source text into tokens on demand.

The parser pulls one token at a time through next_token(); tokenize()
drains the whole stream for tools and tests. Any invalid character or
unterminated string raises immediately, there is no recovery.

Author: xwest
"""

import logging
from typing import Iterator, List

from .tokens import Token, TokenType, SourceLocation, KEYWORDS, OPERATORS
from .errors import (
    create_invalid_character_error, create_unterminated_string_error,
    create_incomplete_operator_error
)
from ..log import TRACE

logger = logging.getLogger(__name__)


# ASCII only, unicode digits and letters are invalid characters
def _is_digit(char: str) -> bool:
    return '0' <= char <= '9'


def _is_identifier_start(char: str) -> bool:
    return ('a' <= char <= 'z') or ('A' <= char <= 'Z') or char == '_'


def _is_identifier_continue(char: str) -> bool:
    return _is_identifier_start(char) or _is_digit(char)


def _is_whitespace(char: str) -> bool:
    return char in " \t\r\n\f\v"


class Lexer:
    """
    ZR# lexical analyzer.

    Stateful over a cursor (position, line, column). Lines and columns are
    1-based.
    """

    def __init__(self, source: str, filename: str = "<unknown>"):
        """
        Initialize the lexer with source code.

        Args:
            source: Source code string
            filename: Name of source file for error reporting
        """
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.column = 1
        self._finished = False

    def next_token(self) -> Token:
        """
        Produce the next token.

        Returns an EOF token once the input is exhausted, and keeps
        returning EOF on further calls.

        Raises:
            LexerError: on an invalid character or unterminated string
        """
        self._skip_whitespace_and_comments()

        start = self._location()

        if self.pos >= len(self.source):
            self._finished = True
            return Token(TokenType.EOF, "", start)

        current_char = self.source[self.pos]

        if _is_digit(current_char):
            token = self._tokenize_number(start)
        elif _is_identifier_start(current_char):
            token = self._tokenize_identifier_or_keyword(start)
        elif current_char == '"':
            token = self._tokenize_string(start)
        else:
            token = self._tokenize_operator(start)

        logger.log(TRACE, "token %s at %s", token, token.location)
        return token

    def tokenize(self) -> List[Token]:
        """
        Tokenize the entire source.

        Returns:
            List of tokens ending with the EOF token
        """
        return list(self)

    def __iter__(self) -> Iterator[Token]:
        """Yield tokens up to and including EOF."""
        while not self._finished:
            yield self.next_token()

    def _tokenize_number(self, start: SourceLocation) -> Token:
        """Maximal run of digits with at most one decimal point."""
        begin = self.pos
        seen_dot = False

        while self.pos < len(self.source):
            char = self.source[self.pos]
            if _is_digit(char):
                self._advance()
            elif char == '.' and not seen_dot:
                seen_dot = True
                self._advance()
            else:
                break

        return Token(TokenType.NUMBER, self.source[begin:self.pos], start)

    def _tokenize_identifier_or_keyword(self, start: SourceLocation) -> Token:
        """Tokenize an identifier or keyword."""
        begin = self.pos
        self._advance()

        while self.pos < len(self.source) and _is_identifier_continue(self.source[self.pos]):
            self._advance()

        lexeme = self.source[begin:self.pos]
        token_type = KEYWORDS.get(lexeme, TokenType.IDENTIFIER)
        return Token(token_type, lexeme, start)

    def _tokenize_string(self, start: SourceLocation) -> Token:
        """Tokenize a double-quoted string; the token keeps the contents only."""
        self._advance()  # Skip opening quote
        begin = self.pos

        while self.pos < len(self.source):
            char = self.source[self.pos]
            if char == '"':
                value = self.source[begin:self.pos]
                self._advance()  # Skip closing quote
                return Token(TokenType.STRING, value, start)
            if char == '\n':
                raise create_unterminated_string_error(start, "newline before closing quote")
            self._advance()

        raise create_unterminated_string_error(start, "end of input before closing quote")

    def _tokenize_operator(self, start: SourceLocation) -> Token:
        """Operators and punctuation, longest match first."""
        two = self.source[self.pos:self.pos + 2]
        if len(two) == 2 and two in OPERATORS:
            self._advance_by(2)
            return Token(OPERATORS[two], two, start)

        char = self.source[self.pos]
        if char in ('&', '|'):
            raise create_incomplete_operator_error(char, start)

        if char in OPERATORS:
            self._advance()
            return Token(OPERATORS[char], char, start)

        raise create_invalid_character_error(char, start)

    def _skip_whitespace_and_comments(self):
        """Skip whitespace and // comments."""
        while self.pos < len(self.source):
            if _is_whitespace(self.source[self.pos]):
                self._advance()
                continue

            if self.source.startswith('//', self.pos):
                while self.pos < len(self.source) and self.source[self.pos] != '\n':
                    self._advance()
                continue

            break

    def _location(self) -> SourceLocation:
        return SourceLocation(self.filename, self.line, self.column, self.pos)

    def _advance(self):
        """Advance position by one character, updating line/column."""
        if self.pos < len(self.source):
            if self.source[self.pos] == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def _advance_by(self, count: int):
        """Advance position by multiple characters."""
        for _ in range(count):
            self._advance()


def tokenize_string(source: str, filename: str = "<string>") -> List[Token]:
    """
    Convenience function to tokenize a source string.

    Raises:
        LexerError: If lexing fails
    """
    return Lexer(source, filename).tokenize()


def tokenize_file(filepath: str) -> List[Token]:
    """
    Convenience function to tokenize a source file.

    Raises:
        LexerError: If lexing fails
        OSError: If file cannot be read
    """
    with open(filepath, 'r', encoding='utf-8') as f:
        source = f.read()

    return tokenize_string(source, filepath)
