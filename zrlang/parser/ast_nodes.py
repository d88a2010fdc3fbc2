"""
Abstract Syntax Tree node definitions for ZR#.

Every node has exactly one owner: its parent, or the module loader for a
file's root Block. The tree never shares subtrees and has no cycles.
release_tree() tears a tree down once the evaluator is done with it.

Author: xwest
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Any, Dict, Tuple, Union
from dataclasses import dataclass
from enum import Enum
import uuid

from ..lexer.tokens import SourceLocation


class ASTNodeType(Enum):
    """Enumeration of all AST node types."""

    # Literals and names
    NUMBER_LITERAL = "NumberLiteral"
    STRING_LITERAL = "StringLiteral"
    BOOL_LITERAL = "BoolLiteral"
    IDENTIFIER = "Identifier"

    # Expressions
    BINARY_OP = "BinaryOp"

    # Statements
    LET = "Let"
    IF = "If"
    BLOCK = "Block"
    PRINT = "Print"
    MODULE_INCLUDE = "ModuleInclude"

    # Reserved, never produced by the parser
    FUNCTION_DEF = "Func"
    FUNCTION_CALL = "Call"
    RETURN = "Return"
    WHILE = "While"


class DeclaredType(Enum):
    """Type names accepted in a `let` annotation."""
    INT32 = "int32"
    INT64 = "int64"
    FLOAT = "float"
    BOOL = "bool"
    STRING = "string"


@dataclass
class SourceSpan:
    """Represents a span of source code (start and end locations)."""
    start: SourceLocation
    end: SourceLocation

    def __str__(self) -> str:
        if self.start.filename == self.end.filename:
            return f"{self.start.filename}:{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"
        return f"{self.start}-{self.end}"


class ASTNode(ABC):
    """Base class for all AST nodes."""

    def __init__(self, node_type: ASTNodeType, span: SourceSpan):
        self.node_type = node_type
        self.span = span
        self.parent: Optional['ASTNode'] = None
        self.released = False
        # Generate unique ID for hashability
        self._id = uuid.uuid4()

    @abstractmethod
    def children(self) -> List['ASTNode']:
        """Get all owned child nodes."""
        pass

    def _drop_children(self):
        """Forget every owned child and payload; called by release_tree."""
        pass

    def set_parent(self, parent: 'ASTNode'):
        """Set the parent node."""
        self.parent = parent

    @property
    def location(self) -> SourceLocation:
        return self.span.start

    def __str__(self) -> str:
        return f"{self.node_type.value}@{self.span}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(span={self.span})"

    def __hash__(self) -> int:
        """Hash based on unique ID for use in dictionaries."""
        return hash(self._id)

    def __eq__(self, other) -> bool:
        """Equality based on unique ID."""
        if not isinstance(other, ASTNode):
            return False
        return self._id == other._id


# ============================================================================
# Expressions
# ============================================================================

class Expression(ASTNode):
    """Base class for expressions."""
    pass


class NumberLiteral(Expression):
    """Numeric literal; the text is kept verbatim and converted at evaluation."""
    text: str
    is_float: bool

    def __init__(self, text: str, span: SourceSpan):
        super().__init__(ASTNodeType.NUMBER_LITERAL, span)
        self.text = text
        self.is_float = '.' in text

    def children(self) -> List[ASTNode]:
        return []

    def _drop_children(self):
        self.text = None


class StringLiteral(Expression):
    """String literal."""
    value: str

    def __init__(self, value: str, span: SourceSpan):
        super().__init__(ASTNodeType.STRING_LITERAL, span)
        self.value = value

    def children(self) -> List[ASTNode]:
        return []

    def _drop_children(self):
        self.value = None


class BoolLiteral(Expression):
    """`true` or `false`."""
    value: bool

    def __init__(self, value: bool, span: SourceSpan):
        super().__init__(ASTNodeType.BOOL_LITERAL, span)
        self.value = value

    def children(self) -> List[ASTNode]:
        return []


class Identifier(Expression):
    """Identifier expression."""
    name: str

    def __init__(self, name: str, span: SourceSpan):
        super().__init__(ASTNodeType.IDENTIFIER, span)
        self.name = name

    def children(self) -> List[ASTNode]:
        return []

    def _drop_children(self):
        self.name = None


class BinaryOp(Expression):
    """Binary operation expression."""
    left: Expression
    operator: str
    right: Expression

    def __init__(self, left: Expression, operator: str, right: Expression, span: SourceSpan):
        super().__init__(ASTNodeType.BINARY_OP, span)
        self.left = left
        self.operator = operator
        self.right = right

        left.set_parent(self)
        right.set_parent(self)

    def children(self) -> List[ASTNode]:
        return [self.left, self.right]

    def _drop_children(self):
        self.left = None
        self.right = None
        self.operator = None


class FunctionCall(Expression):
    """Reserved: function call expression."""
    name: str
    args: List[Expression]

    def __init__(self, name: str, args: List[Expression], span: SourceSpan):
        super().__init__(ASTNodeType.FUNCTION_CALL, span)
        self.name = name
        self.args = args
        for arg in args:
            arg.set_parent(self)

    def children(self) -> List[ASTNode]:
        return list(self.args)

    def _drop_children(self):
        self.args = []
        self.name = None


# ============================================================================
# Statements
# ============================================================================

class Statement(ASTNode):
    """Base class for statements."""
    pass


class Block(Statement):
    """Ordered list of statements; also the root of every parsed file."""
    statements: List[ASTNode]

    def __init__(self, statements: List[ASTNode], span: SourceSpan):
        super().__init__(ASTNodeType.BLOCK, span)
        self.statements = statements
        for stmt in statements:
            stmt.set_parent(self)

    def children(self) -> List[ASTNode]:
        return list(self.statements)

    def _drop_children(self):
        self.statements = []


class LetStatement(Statement):
    """`let name [: type] = value`."""
    name: str
    declared_type: Optional[DeclaredType]
    value: Expression

    def __init__(self, name: str, declared_type: Optional[DeclaredType],
                 value: Expression, span: SourceSpan):
        super().__init__(ASTNodeType.LET, span)
        self.name = name
        self.declared_type = declared_type
        self.value = value

        value.set_parent(self)

    def children(self) -> List[ASTNode]:
        return [self.value]

    def _drop_children(self):
        self.value = None
        self.name = None


class IfStatement(Statement):
    """If statement with optional else block."""
    condition: Expression
    body: Block
    else_body: Optional[Block] = None

    def __init__(self, condition: Expression, body: Block,
                 else_body: Optional[Block], span: SourceSpan):
        super().__init__(ASTNodeType.IF, span)
        self.condition = condition
        self.body = body
        self.else_body = else_body

        condition.set_parent(self)
        body.set_parent(self)
        if else_body:
            else_body.set_parent(self)

    def children(self) -> List[ASTNode]:
        children = [self.condition, self.body]
        if self.else_body:
            children.append(self.else_body)
        return children

    def _drop_children(self):
        self.condition = None
        self.body = None
        self.else_body = None


class PrintStatement(Statement):
    """`print expr`."""
    expression: Expression

    def __init__(self, expression: Expression, span: SourceSpan):
        super().__init__(ASTNodeType.PRINT, span)
        self.expression = expression
        expression.set_parent(self)

    def children(self) -> List[ASTNode]:
        return [self.expression]

    def _drop_children(self):
        self.expression = None


class ModuleInclude(Statement):
    """`loadin "path"`; the path never carries the source extension."""
    path: str

    def __init__(self, path: str, span: SourceSpan):
        super().__init__(ASTNodeType.MODULE_INCLUDE, span)
        self.path = path

    def children(self) -> List[ASTNode]:
        return []

    def _drop_children(self):
        self.path = None


class FunctionDef(Statement):
    """Reserved: function definition."""
    name: str
    params: List[str]
    body: Block

    def __init__(self, name: str, params: List[str], body: Block, span: SourceSpan):
        super().__init__(ASTNodeType.FUNCTION_DEF, span)
        self.name = name
        self.params = params
        self.body = body
        body.set_parent(self)

    def children(self) -> List[ASTNode]:
        return [self.body]

    def _drop_children(self):
        self.body = None
        self.params = []
        self.name = None


class ReturnStatement(Statement):
    """Reserved: return statement."""
    value: Optional[Expression]

    def __init__(self, value: Optional[Expression], span: SourceSpan):
        super().__init__(ASTNodeType.RETURN, span)
        self.value = value
        if value:
            value.set_parent(self)

    def children(self) -> List[ASTNode]:
        return [self.value] if self.value else []

    def _drop_children(self):
        self.value = None


class WhileLoop(Statement):
    """Reserved: while loop."""
    condition: Expression
    body: Block

    def __init__(self, condition: Expression, body: Block, span: SourceSpan):
        super().__init__(ASTNodeType.WHILE, span)
        self.condition = condition
        self.body = body
        condition.set_parent(self)
        body.set_parent(self)

    def children(self) -> List[ASTNode]:
        return [self.condition, self.body]

    def _drop_children(self):
        self.condition = None
        self.body = None


# ============================================================================
# Tree utilities
# ============================================================================

def release_tree(node: Optional[ASTNode]) -> int:
    """
    Tear down a tree: every owned child and payload is dropped exactly once.

    Releasing None is a no-op. Releasing an already released node does
    nothing, so a subtree is never torn down twice. Returns the number of
    nodes released.
    """
    if node is None or node.released:
        return 0

    released = 0
    stack = [node]
    while stack:
        current = stack.pop()
        if current is None or current.released:
            continue
        stack.extend(current.children())
        current._drop_children()
        current.parent = None
        current.released = True
        released += 1

    return released


def _describe(node: ASTNode) -> str:
    details: Dict[str, Any] = {}
    if isinstance(node, NumberLiteral):
        details["text"] = node.text
        details["type"] = "float" if node.is_float else "int64"
    elif isinstance(node, (StringLiteral, BoolLiteral)):
        details["value"] = node.value
    elif isinstance(node, Identifier):
        details["name"] = node.name
    elif isinstance(node, BinaryOp):
        details["op"] = node.operator
    elif isinstance(node, LetStatement):
        details["name"] = node.name
        if node.declared_type is not None:
            details["type"] = node.declared_type.value
    elif isinstance(node, ModuleInclude):
        details["path"] = node.path

    label = node.node_type.value
    if details:
        label += " " + " ".join(f"{k}={v!r}" for k, v in details.items())
    return label


def dump_tree(node: Optional[ASTNode], indent: int = 0) -> str:
    """
    Render a tree as an indented outline (used by `zr ast`).

    Walks with an explicit stack, so long operator chains do not hit the
    recursion limit.
    """
    lines: List[str] = []
    stack: List[Tuple[Union[ASTNode, str, None], int]] = [(node, indent)]

    while stack:
        item, depth = stack.pop()
        if isinstance(item, str):
            lines.append("  " * depth + item)
            continue
        if item is None:
            lines.append("  " * depth + "<none>")
            continue

        lines.append("  " * depth + _describe(item))
        if isinstance(item, IfStatement):
            pending = [
                ("condition:", depth + 1), (item.condition, depth + 2),
                ("then:", depth + 1), (item.body, depth + 2),
            ]
            if item.else_body is not None:
                pending += [("else:", depth + 1), (item.else_body, depth + 2)]
        else:
            pending = [(child, depth + 1) for child in item.children()]
        stack.extend(reversed(pending))

    return "\n".join(lines)
