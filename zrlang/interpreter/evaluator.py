"""
Tree-walking evaluator for ZR#.

Walks the AST against one flat SymbolTable. Runtime failures are ERROR
values: every step checks the operands it consumed and hands an ERROR
back unchanged before doing any further work.

Block semantics: statements run in order, the first ERROR stops the block
and becomes its result, an empty block yields VOID, otherwise the block
yields its last value. run_program() is the file-level driver: an ERROR
from one top-level statement is reported and the next statement still
runs, so a failure only aborts its smallest enclosing block.

Author: xwest
"""

import logging
import sys
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, TextIO

from ..parser.ast_nodes import (
    ASTNode, ASTNodeType, Block, BinaryOp, BoolLiteral,
    Identifier, IfStatement, LetStatement, NumberLiteral, PrintStatement,
    StringLiteral,
)
from .errors import (
    create_condition_type_error, create_declared_type_error,
    create_division_by_zero_error, create_literal_range_error,
    create_narrowing_overflow_error, create_type_mismatch_error,
    create_undefined_variable_error, create_unsupported_node_error,
)
from .symbol_table import SymbolTable
from .values import (
    DECLARED_TO_VALUE_TYPE, INT64_MAX, VOID, Value, ValueType,
    convert_to, promote_pair, wrap_int64,
)

logger = logging.getLogger(__name__)


ARITHMETIC_OPERATORS = frozenset({"+", "-", "*", "/"})
COMPARISON_OPERATORS = frozenset({"==", "!=", "<", ">", "<=", ">="})
LOGICAL_OPERATORS = frozenset({"&&", "||"})
EQUALITY_OPERATORS = frozenset({"==", "!="})

INT64_MAX_DIGITS = len(str(INT64_MAX))

UNSUPPORTED_NODES = {
    ASTNodeType.FUNCTION_DEF: "Function definition",
    ASTNodeType.FUNCTION_CALL: "Function call",
    ASTNodeType.RETURN: "return",
    ASTNodeType.WHILE: "while loop",
    ASTNodeType.MODULE_INCLUDE: "loadin inside a block",
}


@dataclass
class ProgramResult:
    """Outcome of running one file's top-level statements."""
    value: Value
    errors: List[Value] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def _compare(operator: str, a, b) -> bool:
    if operator == "==":
        return a == b
    if operator == "!=":
        return a != b
    if operator == "<":
        return a < b
    if operator == ">":
        return a > b
    if operator == "<=":
        return a <= b
    return a >= b


class Evaluator:
    """
    ZR# evaluator.

    Holds a reference to the session's symbol table and writes `print`
    output to the given stream (stdout by default).
    """

    def __init__(self, symbols: SymbolTable, output: Optional[TextIO] = None):
        self.symbols = symbols
        self.output = output if output is not None else sys.stdout

        self._handlers: Dict[ASTNodeType, Callable[[ASTNode], Value]] = {
            ASTNodeType.NUMBER_LITERAL: self._eval_number,
            ASTNodeType.STRING_LITERAL: self._eval_string,
            ASTNodeType.BOOL_LITERAL: self._eval_bool,
            ASTNodeType.IDENTIFIER: self._eval_identifier,
            ASTNodeType.BINARY_OP: self._eval_binary,
            ASTNodeType.LET: self._eval_let,
            ASTNodeType.IF: self._eval_if,
            ASTNodeType.BLOCK: self._eval_block,
            ASTNodeType.PRINT: self._eval_print,
        }

    def evaluate(self, node: Optional[ASTNode]) -> Value:
        """Evaluate any node. An absent node yields VOID."""
        if node is None:
            return VOID

        handler = self._handlers.get(node.node_type)
        if handler is None:
            what = UNSUPPORTED_NODES.get(node.node_type, node.node_type.value)
            return create_unsupported_node_error(what, node.location)

        return handler(node)

    def run_program(self, program: Block,
                    report: Optional[Callable[[Value], None]] = None) -> ProgramResult:
        """
        Run a file's top-level statements.

        Each ERROR is passed to report (when given) and collected; the
        following top-level statements still run.
        """
        result = ProgramResult(VOID)
        for stmt in program.statements:
            value = self.evaluate(stmt)
            if value.is_error:
                logger.debug("top-level error at %s: %s", value.location, value.message)
                result.errors.append(value)
                if report is not None:
                    report(value)
            result.value = value
        return result

    # Literals and names

    def _eval_number(self, node: NumberLiteral) -> Value:
        if node.is_float:
            return Value.float_(float(node.text))

        # Too many digits for int64
        if len(node.text.lstrip("0")) > INT64_MAX_DIGITS:
            return create_literal_range_error(node.text, node.location)

        number = int(node.text)
        if number > INT64_MAX:
            return create_literal_range_error(node.text, node.location)
        return Value.int64(number)

    def _eval_string(self, node: StringLiteral) -> Value:
        return Value.string(node.value)

    def _eval_bool(self, node: BoolLiteral) -> Value:
        return Value.bool_(node.value)

    def _eval_identifier(self, node: Identifier) -> Value:
        value = self.symbols.get_value(node.name)
        if value is None:
            return create_undefined_variable_error(node.name, node.location)
        return value

    # Expressions

    def _eval_binary(self, node: BinaryOp) -> Value:
        """
        Evaluate an operator chain.

        Chains group to the right, so `a op b op c` is a spine of BinaryOp
        nodes down the right side. The spine is walked in a loop: operands
        are evaluated left to right, then folded from the right.
        """
        spine: List[BinaryOp] = []
        operands: List[Value] = []
        current: ASTNode = node
        while isinstance(current, BinaryOp):
            spine.append(current)
            value = self.evaluate(current.left)
            if value.is_error:
                return value
            operands.append(value)
            current = current.right

        result = self.evaluate(current)
        if result.is_error:
            return result

        for op_node, left in zip(reversed(spine), reversed(operands)):
            result = self._apply_binary(op_node, left, result)
            if result.is_error:
                return result
        return result

    def _apply_binary(self, node: BinaryOp, left: Value, right: Value) -> Value:
        operator = node.operator

        if operator in LOGICAL_OPERATORS:
            if left.type != ValueType.BOOL or right.type != ValueType.BOOL:
                return create_type_mismatch_error(operator, left, right, node.location)
            if operator == "&&":
                return Value.bool_(left.payload and right.payload)
            return Value.bool_(left.payload or right.payload)

        if left.type == ValueType.STRING and right.type == ValueType.STRING:
            if operator not in EQUALITY_OPERATORS:
                return create_type_mismatch_error(operator, left, right, node.location)
            return Value.bool_(_compare(operator, left.payload, right.payload))

        promoted = promote_pair(left, right)
        if promoted is None:
            return create_type_mismatch_error(operator, left, right, node.location)
        a, b = promoted

        if operator in COMPARISON_OPERATORS:
            return Value.bool_(_compare(operator, a.payload, b.payload))

        if a.type == ValueType.FLOAT:
            return self._float_arithmetic(operator, a.payload, b.payload, node)
        return self._int_arithmetic(operator, a.payload, b.payload, node)

    def _float_arithmetic(self, operator: str, a: float, b: float, node: BinaryOp) -> Value:
        if operator == "+":
            return Value.float_(a + b)
        if operator == "-":
            return Value.float_(a - b)
        if operator == "*":
            return Value.float_(a * b)
        if b == 0.0:
            return create_division_by_zero_error(node.location)
        return Value.float_(a / b)

    def _int_arithmetic(self, operator: str, a: int, b: int, node: BinaryOp) -> Value:
        if operator == "+":
            return Value.int64(wrap_int64(a + b))
        if operator == "-":
            return Value.int64(wrap_int64(a - b))
        if operator == "*":
            return Value.int64(wrap_int64(a * b))
        if b == 0:
            return create_division_by_zero_error(node.location)
        # Truncate toward zero
        quotient = abs(a) // abs(b)
        if (a < 0) != (b < 0):
            quotient = -quotient
        return Value.int64(wrap_int64(quotient))

    # Statements

    def _eval_let(self, node: LetStatement) -> Value:
        value = self.evaluate(node.value)
        if value.is_error:
            return value

        if node.declared_type is not None:
            target = DECLARED_TO_VALUE_TYPE[node.declared_type]
            converted, reason = convert_to(value, target)
            if converted is None:
                if reason == "overflow":
                    return create_narrowing_overflow_error(value, target, node.location)
                return create_declared_type_error(node.name, value, target, node.location)
            value = converted

        self.symbols.define(node.name, value, node.location)
        return value

    def _eval_if(self, node: IfStatement) -> Value:
        condition = self.evaluate(node.condition)
        if condition.is_error:
            return condition
        if condition.type != ValueType.BOOL:
            return create_condition_type_error(condition, node.condition.location)

        if condition.payload:
            return self.evaluate(node.body)
        if node.else_body is not None:
            return self.evaluate(node.else_body)
        return VOID

    def _eval_block(self, node: Block) -> Value:
        result = VOID
        for stmt in node.statements:
            result = self.evaluate(stmt)
            if result.is_error:
                return result
        return result

    def _eval_print(self, node: PrintStatement) -> Value:
        value = self.evaluate(node.expression)
        if value.is_error:
            return value

        self.output.write(value.render() + "\n")
        self.output.flush()
        return value
