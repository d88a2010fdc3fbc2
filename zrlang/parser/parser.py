"""
ZR# Recursive Descent Parser

Pulls tokens from the lexer with a single token of lookahead and builds
the AST. There is no backtracking and no error recovery; the first
malformed construct raises ParseError.

Expressions have no precedence table. A primary expression may be
followed by one binary operator whose right-hand side is parsed as a full
expression again, so every operator chain groups to the right:

    2 * 3 + 4    parses as   2 * (3 + 4)
    10 - 4 - 3   parses as   10 - (4 - 3)

This grouping is part of the language and existing programs rely on it.

Author: xwest
"""

import logging
from typing import List, Optional

from ..config import InterpreterConfig, DEFAULT_CONFIG
from ..diagnostics import create_capacity_error
from ..lexer.lexer import Lexer
from ..lexer.tokens import Token, TokenType, BINARY_OPERATORS
from .ast_nodes import (
    ASTNode, Expression, SourceSpan, DeclaredType,
    Block, LetStatement, IfStatement, PrintStatement, ModuleInclude,
    BinaryOp, NumberLiteral, StringLiteral, BoolLiteral, Identifier,
)
from .errors import (
    create_unexpected_token_error, create_invalid_expression_error,
    create_invalid_type_error, create_loadin_target_error,
    create_unsupported_construct_error
)

logger = logging.getLogger(__name__)


TYPE_ANNOTATIONS = {
    TokenType.TYPE_INT: DeclaredType.INT64,
    TokenType.TYPE_INT32: DeclaredType.INT32,
    TokenType.TYPE_INT64: DeclaredType.INT64,
    TokenType.TYPE_FLOAT: DeclaredType.FLOAT,
    TokenType.TYPE_BOOL: DeclaredType.BOOL,
    TokenType.TYPE_STRING: DeclaredType.STRING,
}

RESERVED_STATEMENTS = {TokenType.FUNC, TokenType.RETURN, TokenType.WHILE}


class Parser:
    """
    ZR# recursive descent parser.

    Consumes tokens one at a time from a Lexer and produces a Block as the
    root of every parsed file.
    """

    def __init__(self, lexer: Lexer, config: Optional[InterpreterConfig] = None):
        """
        Initialize parser with a lexer.

        Args:
            lexer: Token source, read one token at a time
            config: Limits (statements per block, nesting depth)
        """
        self.lexer = lexer
        self.config = config or DEFAULT_CONFIG
        self.current: Token = lexer.next_token()
        self.previous: Optional[Token] = None
        self.depth = 0

    def parse(self) -> Block:
        """
        Parse the whole token stream.

        Returns:
            Block holding the file's top-level statements

        Raises:
            ParseError: on the first syntax error
            LexerError: when the lexer fails while the parser pulls tokens
            CapacityError: when a block exceeds the statement limit or
                blocks and parentheses nest too deeply
        """
        start = self.current.location
        statements = self._parse_statements(TokenType.EOF)
        program = Block(statements, SourceSpan(start, self.current.location))
        logger.debug("parsed %d top-level statement(s) from %s", len(statements), self.lexer.filename)
        return program

    def _parse_statements(self, terminator: TokenType) -> List[ASTNode]:
        statements: List[ASTNode] = []
        limit = self.config.max_block_statements

        while not self._check(terminator) and not self._check(TokenType.EOF):
            # Empty statement
            if self._match(TokenType.SEMICOLON):
                continue

            stmt = self._parse_statement()
            if len(statements) >= limit:
                raise create_capacity_error("C003", limit, stmt.location)
            statements.append(stmt)

        return statements

    def _parse_block(self) -> Block:
        """Parse `{ statements }`."""
        start_token = self._consume(TokenType.LEFT_BRACE)
        self._enter(start_token)
        statements = self._parse_statements(TokenType.RIGHT_BRACE)
        end_token = self._consume(TokenType.RIGHT_BRACE)
        self.depth -= 1
        return Block(statements, SourceSpan(start_token.location, end_token.location))

    def _parse_statement(self) -> ASTNode:
        """Parse one statement and its optional trailing semicolon."""
        if self._check(TokenType.LET):
            stmt = self._parse_let_statement()
        elif self._check(TokenType.IF):
            stmt = self._parse_if_statement()
        elif self._check(TokenType.PRINT):
            stmt = self._parse_print_statement()
        elif self._check(TokenType.LOADIN):
            stmt = self._parse_loadin_statement()
        elif self.current.type in RESERVED_STATEMENTS:
            raise create_unsupported_construct_error(self.current)
        else:
            stmt = self._parse_expression()

        self._match(TokenType.SEMICOLON)
        return stmt

    def _parse_let_statement(self) -> LetStatement:
        """Parse `let name [: type] = expr`."""
        start_token = self._consume(TokenType.LET)
        name_token = self._consume(TokenType.IDENTIFIER, "variable name")

        declared_type = None
        if self._match(TokenType.COLON):
            type_token = self.current
            if not type_token.is_type_keyword:
                raise create_invalid_type_error(type_token)
            self._advance()
            declared_type = TYPE_ANNOTATIONS[type_token.type]

        self._consume(TokenType.ASSIGN)
        value = self._parse_expression()

        span = SourceSpan(start_token.location, self.previous.location)
        return LetStatement(name_token.lexeme, declared_type, value, span)

    def _parse_if_statement(self) -> IfStatement:
        """Parse `if (cond) { ... } [else { ... }]`."""
        start_token = self._consume(TokenType.IF)
        self._consume(TokenType.LEFT_PAREN)
        condition = self._parse_expression()
        self._consume(TokenType.RIGHT_PAREN)

        body = self._parse_block()

        else_body = None
        if self._match(TokenType.ELSE):
            else_body = self._parse_block()

        span = SourceSpan(start_token.location, self.previous.location)
        return IfStatement(condition, body, else_body, span)

    def _parse_print_statement(self) -> PrintStatement:
        start_token = self._consume(TokenType.PRINT)
        expression = self._parse_expression()
        return PrintStatement(expression, SourceSpan(start_token.location, self.previous.location))

    def _parse_loadin_statement(self) -> ModuleInclude:
        start_token = self._consume(TokenType.LOADIN)
        if not self._check(TokenType.STRING):
            raise create_loadin_target_error(self.current)
        path_token = self._advance()
        return ModuleInclude(path_token.lexeme, SourceSpan(start_token.location, path_token.location))

    def _parse_expression(self) -> Expression:
        """
        Parse `primary [operator expression]`.

        Operands and operators are collected in a loop and the right-nested
        tree is built afterwards from the last operand backwards.
        """
        operands = [self._parse_primary()]
        operators: List[str] = []

        while self.current.is_binary_operator:
            operators.append(BINARY_OPERATORS[self._advance().type])
            operands.append(self._parse_primary())

        end = self.previous.location
        expression = operands.pop()
        while operators:
            left = operands.pop()
            expression = BinaryOp(left, operators.pop(), expression, SourceSpan(left.location, end))
        return expression

    def _parse_primary(self) -> Expression:
        token = self.current
        span = SourceSpan(token.location, token.location)

        if token.type == TokenType.IDENTIFIER:
            self._advance()
            return Identifier(token.lexeme, span)
        if token.type == TokenType.NUMBER:
            self._advance()
            return NumberLiteral(token.lexeme, span)
        if token.type == TokenType.STRING:
            self._advance()
            return StringLiteral(token.lexeme, span)
        if token.type in (TokenType.TRUE, TokenType.FALSE):
            self._advance()
            return BoolLiteral(token.type == TokenType.TRUE, span)
        if token.type == TokenType.LEFT_PAREN:
            self._advance()
            self._enter(token)
            expression = self._parse_expression()
            self._consume(TokenType.RIGHT_PAREN)
            self.depth -= 1
            return expression

        raise create_invalid_expression_error(token)

    def _enter(self, opening: Token):
        """Count one more open brace or parenthesis."""
        self.depth += 1
        if self.depth > self.config.max_nesting_depth:
            raise create_capacity_error("C004", self.config.max_nesting_depth, opening.location)

    # Token helpers

    def _match(self, token_type: TokenType) -> bool:
        """Consume the current token if it has the given type."""
        if self._check(token_type):
            self._advance()
            return True
        return False

    def _check(self, token_type: TokenType) -> bool:
        return self.current.type == token_type

    def _advance(self) -> Token:
        """Move to the next token, returning the one just consumed."""
        self.previous = self.current
        if self.current.type != TokenType.EOF:
            self.current = self.lexer.next_token()
        return self.previous

    def _consume(self, token_type: TokenType, description: Optional[str] = None) -> Token:
        """Consume token of expected type or raise error."""
        if self._check(token_type):
            return self._advance()
        raise create_unexpected_token_error(description or token_type, self.current)


def parse_string(source: str, filename: str = "<string>",
                 config: Optional[InterpreterConfig] = None) -> Block:
    """
    Convenience function to parse a source string.

    Raises:
        LexerError, ParseError, CapacityError
    """
    return Parser(Lexer(source, filename), config).parse()


def parse_file(filepath: str, config: Optional[InterpreterConfig] = None) -> Block:
    """
    Convenience function to parse a source file.

    Raises:
        LexerError, ParseError, CapacityError, OSError
    """
    with open(filepath, 'r', encoding='utf-8') as f:
        source = f.read()

    return parse_string(source, filepath, config)
