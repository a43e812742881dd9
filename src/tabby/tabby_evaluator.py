"""
Tree-walking evaluator for Tabby syntax trees.

This module defines the `Evaluator` class, which executes the statements the
parser produces. Nodes are dispatched by kind to `eval_<kind>` methods.

Values are plain Python objects:
    - `int` for integers, `str` for strings, `bool` for comparison results
    - builtin functions are Python callables
    - `None` is the result of statements that produce nothing

Behavior:
    - Bindings live in a dict owned by the caller, so one environment can be
      shared across many parses (the REPL keeps one for its whole session).
    - Only builtin functions can be called: `print` and `len`.
    - `while` evaluates to the value of the last executed body, or None.

Raises:
    - `TabbyRuntimeError`: For unknown identifiers, unsupported operand types,
      division by zero, calling a non-function, or an incomplete tree.
    - `NotImplementedError`: If a node kind has no evaluator method.
"""

import sys
from collections.abc import Callable
from typing import Any, TextIO

from tabby.tabby_ast import Block, Identifier, If, InfixOp, Node, Statement, While
from tabby.tabby_constants import COMPOUND_OPERATORS


class TabbyRuntimeError(RuntimeError):
    """Raised when a syntax tree cannot be evaluated.

    Attributes:
        line (int): Line of the node that failed, 0 when unknown.
        col (int): Column of the node that failed, 0 when unknown.
    """

    def __init__(self, message: str, line: int = 0, col: int = 0) -> None:
        if line:
            message = f"{message} at line {line}, col {col}"
        super().__init__(message)
        self.line = line
        self.col = col


def is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def is_truthy(value: Any) -> bool:
    """Booleans as themselves, non-zero integers, non-empty strings; None is false."""
    if value is None:
        return False
    if isinstance(value, (bool, int, str)):
        return bool(value)
    return True


def type_name(value: Any) -> str:
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "BOOL"
    if isinstance(value, int):
        return "INT"
    if isinstance(value, str):
        return "STR"
    if callable(value):
        return "BUILTIN"
    return type(value).__name__.upper()


def display(value: Any) -> str:
    """Renders a runtime value the way the REPL and `print` show it."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if callable(value):
        return "builtin function"
    return str(value)


def truncating_div(left: int, right: int) -> int:
    quotient = abs(left) // abs(right)
    return quotient if (left >= 0) == (right >= 0) else -quotient


class Evaluator:
    """Evaluates Tabby statements and expressions.

    Attributes:
        env (dict[str, Any]): Variable bindings, shared with the caller.
        out (TextIO): Stream the `print` builtin writes to.
        builtins (dict[str, Callable]): Functions callable from Tabby code.
    """

    def __init__(self, env: dict[str, Any] | None = None, out: TextIO | None = None) -> None:
        self.env: dict[str, Any] = env if env is not None else {}
        self.out: TextIO = out if out is not None else sys.stdout
        self.builtins: dict[str, Callable[..., Any]] = {
            "print": self.builtin_print,
            "len": self.builtin_len,
        }

    def run(self, statements: list[Statement]) -> Any:
        """Evaluates statements in order and returns the last value."""
        result = None
        for stmt in statements:
            result = self.evaluate(stmt)
        return result

    def evaluate(self, node: Node | None) -> Any:
        """Dispatches a node to its `eval_<kind>` method."""
        if node is None:
            raise TabbyRuntimeError("cannot evaluate an incomplete expression")
        meth = getattr(self, f"eval_{node.kind}", None)
        if meth is None:
            raise NotImplementedError(
                f"No evaluator method for node kind '{node.kind}' "
                f"(line {node.line}, col {node.col})"
            )
        return meth(node)

    # Builtins

    def builtin_print(self, *args: Any) -> None:
        self.out.write(" ".join(display(a) for a in args) + "\n")

    def builtin_len(self, *args: Any) -> int:
        if len(args) != 1 or not isinstance(args[0], str):
            kinds = ", ".join(type_name(a) for a in args)
            raise TabbyRuntimeError(f"len expects one STR argument, got ({kinds})")
        return len(args[0])

    # Statements

    def eval_program(self, node: Any) -> Any:
        return self.run(node.statements)

    def eval_var_binding(self, node: Any) -> Any:
        value = self.evaluate(node.value)
        self.env[node.name] = value
        return value

    def eval_expression_statement(self, node: Any) -> Any:
        return self.evaluate(node.expr)

    def eval_block(self, node: Block) -> Any:
        return self.run(node.statements)

    # Expressions

    def eval_identifier(self, node: Identifier) -> Any:
        if node.name in self.env:
            return self.env[node.name]
        if node.name in self.builtins:
            return self.builtins[node.name]
        raise TabbyRuntimeError(f"identifier not found: {node.name}", node.line, node.col)

    def eval_int_literal(self, node: Any) -> int:
        return node.value

    def eval_string_literal(self, node: Any) -> str:
        return node.value

    def eval_prefix_op(self, node: Any) -> Any:
        operand = self.evaluate(node.operand)
        if node.operator == "-" and is_int(operand):
            return -operand
        raise TabbyRuntimeError(
            f"unknown operator: {node.operator}{type_name(operand)}", node.line, node.col
        )

    def eval_infix_op(self, node: InfixOp) -> Any:
        op = node.operator
        if op == "and":
            return is_truthy(self.evaluate(node.left)) and is_truthy(
                self.evaluate(node.right)
            )
        if op == "or":
            return is_truthy(self.evaluate(node.left)) or is_truthy(
                self.evaluate(node.right)
            )
        if op in COMPOUND_OPERATORS:
            return self.eval_compound_assignment(node)
        left = self.evaluate(node.left)
        right = self.evaluate(node.right)
        return self.apply_operator(op, left, right, node)

    def eval_compound_assignment(self, node: InfixOp) -> Any:
        if not isinstance(node.left, Identifier):
            raise TabbyRuntimeError(
                f"cannot assign with {node.operator} to {node.left}", node.line, node.col
            )
        current = self.evaluate(node.left)
        right = self.evaluate(node.right)
        value = self.apply_operator(COMPOUND_OPERATORS[node.operator], current, right, node)
        self.env[node.left.name] = value
        return value

    def apply_operator(self, op: str, left: Any, right: Any, node: Node) -> Any:
        if is_int(left) and is_int(right):
            return self.apply_int_operator(op, left, right, node)
        if isinstance(left, str) or isinstance(right, str):
            if op == "+" and (is_int(left) or isinstance(left, str)) and (
                is_int(right) or isinstance(right, str)
            ):
                return f"{left}{right}"
            if op in ("==", "!=") and isinstance(left, str) and isinstance(right, str):
                return (left == right) if op == "==" else (left != right)
        if isinstance(left, bool) and isinstance(right, bool) and op in ("==", "!="):
            return (left == right) if op == "==" else (left != right)
        raise TabbyRuntimeError(
            f"unknown operator: {type_name(left)} {op} {type_name(right)}",
            node.line,
            node.col,
        )

    def apply_int_operator(self, op: str, left: int, right: int, node: Node) -> Any:
        if op in ("/", "%") and right == 0:
            raise TabbyRuntimeError("division by zero", node.line, node.col)
        if op == "+":
            return left + right
        if op == "-":
            return left - right
        if op == "*":
            return left * right
        if op == "/":
            return truncating_div(left, right)
        if op == "%":
            return left - right * truncating_div(left, right)
        if op == "<":
            return left < right
        if op == "<=":
            return left <= right
        if op == ">":
            return left > right
        if op == ">=":
            return left >= right
        if op == "==":
            return left == right
        if op == "!=":
            return left != right
        raise TabbyRuntimeError(f"unknown operator: {op}", node.line, node.col)

    def eval_call(self, node: Any) -> Any:
        fn = self.evaluate(node.callee)
        if not callable(fn):
            raise TabbyRuntimeError(
                f"not a function: {type_name(fn)}", node.line, node.col
            )
        args = [self.evaluate(arg) for arg in node.arguments]
        return fn(*args)

    def eval_if(self, node: If) -> Any:
        if is_truthy(self.evaluate(node.condition)):
            return self.evaluate(node.then_block)
        if node.else_block is not None:
            return self.evaluate(node.else_block)
        return None

    def eval_while(self, node: While) -> Any:
        result = None
        while is_truthy(self.evaluate(node.condition)):
            result = self.evaluate(node.body)
        return result


__all__ = ["Evaluator", "TabbyRuntimeError", "display", "is_truthy"]
