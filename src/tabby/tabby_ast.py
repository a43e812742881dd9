"""
Defines the abstract syntax tree (AST) node structure for the Tabby programming language.

Node families:
    Statements:
        VarBinding, ExpressionStatement, Block
    Expressions:
        Identifier, IntLiteral, StringLiteral, PrefixOp, InfixOp, Call, If, While
    Root:
        Program

Every node records the line/column of the token that started it and lists its
data fields in `_fields`. The shared `Node` base uses that list for structural
equality, `repr`, and `to_dict()` serialization. `str(node)` re-serializes the
node in a compact, fully parenthesized form, e.g. `a = (1 + (2 * 3))`.

Children are owned exclusively by their parent, and a missing child (left by
a parse diagnostic) is stored as None.

Usage:
    This module is the parser's output vocabulary and the evaluator's input.

Example:
    node = InfixOp("+", IntLiteral(1), IntLiteral(2))
    str(node)  # "(1 + 2)"
"""

from typing import Any, TypedDict


class ASTDict(TypedDict, total=False):
    """
    TypedDict representation of a node produced by `Node.to_dict()`.

    Only `kind`, `line` and `col` are present on every node; the remaining keys
    depend on the node class.
    """

    kind: str
    line: int
    col: int
    name: str
    value: Any
    expr: "ASTDict | None"
    statements: list["ASTDict"]
    operator: str
    operand: "ASTDict | None"
    left: "ASTDict | None"
    right: "ASTDict | None"
    callee: "ASTDict | None"
    arguments: list["ASTDict | None"]
    condition: "ASTDict | None"
    then_block: "ASTDict | None"
    else_block: "ASTDict | None"
    body: "ASTDict | None"


def _serialize(value: Any) -> Any:
    if isinstance(value, Node):
        return value.to_dict()
    if isinstance(value, list):
        return [_serialize(v) for v in value]
    return value


def _text(node: "Node | None") -> str:
    return "" if node is None else str(node)


class Node:
    """
    Base class of every syntax tree node.

    Attributes:
        kind (str): Snake-case node kind, used for evaluator dispatch.
        line (int): Source line of the node's first token.
        col (int): Source column of the node's first token.
    """

    kind = "node"
    _fields: tuple[str, ...] = ()

    def __init__(self, line: int = 0, col: int = 0) -> None:
        self.line = line
        self.col = col

    def __repr__(self) -> str:
        parts = [f"{name}={getattr(self, name)!r}" for name in self._fields]
        return f"{type(self).__name__}({', '.join(parts)})"

    def __eq__(self, other: Any) -> bool:
        if type(self) is not type(other):
            return False
        return (
            self.line == other.line
            and self.col == other.col
            and all(getattr(self, f) == getattr(other, f) for f in self._fields)
        )

    def to_dict(self) -> ASTDict:
        data: dict[str, Any] = {"kind": self.kind, "line": self.line, "col": self.col}
        for name in self._fields:
            data[name] = _serialize(getattr(self, name))
        return data  # type: ignore[return-value]


class Statement(Node):
    """Marker base for statement nodes."""


class Expression(Node):
    """Marker base for expression nodes."""


# Statements


class VarBinding(Statement):
    kind = "var_binding"
    _fields = ("name", "value")

    def __init__(
        self, name: str, value: Expression | None, line: int = 0, col: int = 0
    ) -> None:
        super().__init__(line, col)
        self.name = name
        self.value = value

    def __str__(self) -> str:
        return f"{self.name} = {_text(self.value)}"


class ExpressionStatement(Statement):
    kind = "expression_statement"
    _fields = ("expr",)

    def __init__(self, expr: Expression | None, line: int = 0, col: int = 0) -> None:
        super().__init__(line, col)
        self.expr = expr

    def __str__(self) -> str:
        return _text(self.expr)


class Block(Statement):
    """Body of a compound construct (`if`, `else`, `while`)."""

    kind = "block"
    _fields = ("statements",)

    def __init__(
        self, statements: list[Statement] | None = None, line: int = 0, col: int = 0
    ) -> None:
        super().__init__(line, col)
        self.statements: list[Statement] = statements or []

    def __str__(self) -> str:
        return "; ".join(str(s) for s in self.statements)


# Expressions


class Identifier(Expression):
    kind = "identifier"
    _fields = ("name",)

    def __init__(self, name: str, line: int = 0, col: int = 0) -> None:
        super().__init__(line, col)
        self.name = name

    def __str__(self) -> str:
        return self.name


class IntLiteral(Expression):
    kind = "int_literal"
    _fields = ("value",)

    def __init__(self, value: int, line: int = 0, col: int = 0) -> None:
        super().__init__(line, col)
        self.value = value

    def __str__(self) -> str:
        return str(self.value)


class StringLiteral(Expression):
    kind = "string_literal"
    _fields = ("value",)

    def __init__(self, value: str, line: int = 0, col: int = 0) -> None:
        super().__init__(line, col)
        self.value = value

    def __str__(self) -> str:
        return f'"{self.value}"'


class PrefixOp(Expression):
    kind = "prefix_op"
    _fields = ("operator", "operand")

    def __init__(
        self, operator: str, operand: Expression | None, line: int = 0, col: int = 0
    ) -> None:
        super().__init__(line, col)
        self.operator = operator
        self.operand = operand

    def __str__(self) -> str:
        return f"({self.operator}{_text(self.operand)})"


class InfixOp(Expression):
    kind = "infix_op"
    _fields = ("operator", "left", "right")

    def __init__(
        self,
        operator: str,
        left: Expression | None,
        right: Expression | None,
        line: int = 0,
        col: int = 0,
    ) -> None:
        super().__init__(line, col)
        self.operator = operator
        self.left = left
        self.right = right

    def __str__(self) -> str:
        return f"({_text(self.left)} {self.operator} {_text(self.right)})"


class Call(Expression):
    kind = "call"
    _fields = ("callee", "arguments")

    def __init__(
        self,
        callee: Expression | None,
        arguments: list[Expression | None] | None = None,
        line: int = 0,
        col: int = 0,
    ) -> None:
        super().__init__(line, col)
        self.callee = callee
        self.arguments: list[Expression | None] = arguments or []

    def __str__(self) -> str:
        args = ", ".join(_text(a) for a in self.arguments)
        return f"{_text(self.callee)}({args})"


class If(Expression):
    kind = "if"
    _fields = ("condition", "then_block", "else_block")

    def __init__(
        self,
        condition: Expression | None,
        then_block: Block,
        else_block: Block | None = None,
        line: int = 0,
        col: int = 0,
    ) -> None:
        super().__init__(line, col)
        self.condition = condition
        self.then_block = then_block
        self.else_block = else_block

    def __str__(self) -> str:
        text = f"if {_text(self.condition)}: {self.then_block}"
        if self.else_block is not None:
            text += f" else: {self.else_block}"
        return text


class While(Expression):
    kind = "while"
    _fields = ("condition", "body")

    def __init__(
        self, condition: Expression | None, body: Block, line: int = 0, col: int = 0
    ) -> None:
        super().__init__(line, col)
        self.condition = condition
        self.body = body

    def __str__(self) -> str:
        return f"while {_text(self.condition)}: {self.body}"


class Program(Node):
    """Root of a parsed source text: the ordered top-level statements."""

    kind = "program"
    _fields = ("statements",)

    def __init__(self, statements: list[Statement] | None = None) -> None:
        super().__init__(1, 1)
        self.statements: list[Statement] = statements or []

    def __str__(self) -> str:
        return "\n".join(str(s) for s in self.statements)


__all__ = [
    "ASTDict",
    "Block",
    "Call",
    "Expression",
    "ExpressionStatement",
    "Identifier",
    "If",
    "InfixOp",
    "IntLiteral",
    "Node",
    "PrefixOp",
    "Program",
    "Statement",
    "StringLiteral",
    "VarBinding",
    "While",
]
