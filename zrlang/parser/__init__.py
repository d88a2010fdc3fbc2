"""
ZR# Parser Package

Recursive descent parser for ZR#. Produces an owned AST whose root is
always a Block.

Key Features:
- One token of lookahead, pulled from the lexer on demand
- Right-grouping binary expressions (no precedence table)
- let / if-else / print / loadin statements
- Reserved AST variants for functions, calls, return and while
- Structured fatal diagnostics on the first syntax error

Author: xwest
"""

from .ast_nodes import (
    ASTNode, ASTNodeType, SourceSpan, DeclaredType,
    Expression, Statement,
    NumberLiteral, StringLiteral, BoolLiteral, Identifier, BinaryOp,
    Block, LetStatement, IfStatement, PrintStatement, ModuleInclude,
    FunctionDef, FunctionCall, ReturnStatement, WhileLoop,
    release_tree, dump_tree,
)
from .parser import Parser, parse_string, parse_file
from .errors import ParseError

__all__ = [
    # Core parser
    "Parser", "parse_string", "parse_file",

    # AST nodes
    "ASTNode", "ASTNodeType", "SourceSpan", "DeclaredType",
    "Expression", "Statement",
    "NumberLiteral", "StringLiteral", "BoolLiteral", "Identifier", "BinaryOp",
    "Block", "LetStatement", "IfStatement", "PrintStatement", "ModuleInclude",
    "FunctionDef", "FunctionCall", "ReturnStatement", "WhileLoop",
    "release_tree", "dump_tree",

    # Error handling
    "ParseError",
]
