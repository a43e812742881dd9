"""
Tabby Language Parser

Parses Tabby language tokens into a list of statement nodes.

This module implements a Pratt (precedence-climbing) parser: every token kind
that can begin an expression has a prefix handler, every token kind that can
continue one has an infix handler bound to a precedence from
`tabby.tabby_constants.PRECEDENCES`. Blocks are delimited by source columns:
a block at nesting depth `d` continues while the first token of the next line
sits at or beyond column `INDENT_WIDTH * d + 1`, i.e. behind `d` full tabs.

Supported Constructs
--------------------
- Statements:
    * Variable bindings: `x = 1 + 2`
    * Expression statements: `f(x)`, `x += 1`
- Expressions:
    * Identifiers, integer and string literals
    * Unary minus, grouping with parentheses
    * Binary operators: `== != < <= > >= + - * / % and or` and the compound
      assignment spellings `+= -= *= /= %=`
    * Calls: `f(a, b)`, `f()`
    * Conditionals: `if cond:` block, optional `elif cond:` / `else:` blocks
    * Loops: `while cond:` block

Parser Behavior
---------------
- Never raises on malformed input. Every failed structural check appends a
  diagnostic string to `Parser.errors` and yields an absent (None) or partial
  node; parsing continues with the next statement.
- Constructing a parser on an empty token list is a caller error and raises
  `ValueError`.

Entry Points
------------
- `parse()`: Parse a full token list into a list of top-level statements.
- `parse_program()`: Same, wrapped in a `Program` root node.
- `parse_statement()`: Parse a single statement at the current position.
- `parse_expression(precedence)`: Parse one expression at the current position.
"""

from __future__ import annotations

from collections.abc import Callable
from types import MappingProxyType

from tabby.tabby_ast import (
    Block,
    Call,
    Expression,
    ExpressionStatement,
    Identifier,
    If,
    InfixOp,
    IntLiteral,
    PrefixOp,
    Program,
    Statement,
    StringLiteral,
    VarBinding,
    While,
)
from tabby.tabby_constants import INDENT_WIDTH, PRECEDENCES, Precedence, TokenKind
from tabby.tabby_lexer import Token

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

PrefixFn = Callable[[], Expression | None]
InfixFn = Callable[[Expression | None], Expression | None]

LAYOUT_TOKENS = (TokenKind.NEWLINE, TokenKind.INDENT)


class Parser:
    """
    Tabby Parser Class

    Holds the token list and the mutable parse state for a single parse: the
    cursor position, the current block depth, and the accumulated diagnostics.
    Create one parser per token list.

    Cursor convention: a parse method starts with the cursor on the first token
    of its construct and returns with the cursor on the construct's last token.

    Attributes
    ----------
    tokens : list[Token]
        The input token stream, always terminated by an EOF token.
    position : int
        Current index into the token stream.
    depth : int
        Current block nesting depth.
    errors : list[str]
        Diagnostics recorded so far.
    prefix_fns : Mapping[TokenKind, PrefixFn]
        Read-only table of prefix handlers.
    infix_fns : Mapping[TokenKind, InfixFn]
        Read-only table of infix handlers.

    Raises
    ------
    ValueError
        If constructed with an empty token list.
    """

    def __init__(self, tokens: list[Token]) -> None:
        if not tokens:
            raise ValueError("no tokens to parse")
        self.tokens: list[Token] = list(tokens)
        if self.tokens[-1].kind is not TokenKind.EOF:
            self.tokens.append(Token(TokenKind.EOF, "", self.tokens[-1].position))
        self.position: int = 0
        self.depth: int = 0
        self.errors: list[str] = []

        self.prefix_fns: MappingProxyType[TokenKind, PrefixFn] = MappingProxyType(
            {
                TokenKind.IDENT: self.parse_identifier,
                TokenKind.PRINT: self.parse_identifier,
                TokenKind.INT: self.parse_int_literal,
                TokenKind.STRING: self.parse_string_literal,
                TokenKind.MINUS: self.parse_prefix_op,
                TokenKind.LPAREN: self.parse_grouping,
                TokenKind.IF: self.parse_if,
                TokenKind.WHILE: self.parse_while,
            }
        )

        infix: dict[TokenKind, InfixFn] = {
            kind: self.parse_infix_op
            for kind in (
                TokenKind.EQ,
                TokenKind.NOT_EQ,
                TokenKind.LT,
                TokenKind.LE,
                TokenKind.GT,
                TokenKind.GE,
                TokenKind.AND,
                TokenKind.OR,
                TokenKind.PLUS,
                TokenKind.PLUS_EQ,
                TokenKind.MINUS,
                TokenKind.MINUS_EQ,
                TokenKind.STAR,
                TokenKind.STAR_EQ,
                TokenKind.SLASH,
                TokenKind.SLASH_EQ,
                TokenKind.PERCENT,
                TokenKind.PERCENT_EQ,
            )
        }
        infix[TokenKind.LPAREN] = self.parse_call
        self.infix_fns: MappingProxyType[TokenKind, InfixFn] = MappingProxyType(infix)

    # Cursor helpers

    def current(self) -> Token:
        """Returns the token under the cursor."""
        return self.tokens[self.position]

    def peek(self, offset: int = 1) -> Token:
        """
        Returns the token `offset` places after the cursor without moving it.

        Args:
            offset (int): Distance from the cursor (default 1).

        Returns:
            Token: The token at that index, or the trailing EOF when past the end.
        """
        index = min(self.position + offset, len(self.tokens) - 1)
        return self.tokens[index]

    def advance(self) -> Token:
        """Moves the cursor one token forward (never past EOF) and returns the new current token."""
        if not self.at_end():
            self.position += 1
        return self.current()

    def at_end(self) -> bool:
        return self.current().kind is TokenKind.EOF

    def at_line_end(self) -> bool:
        """True when the cursor sits on a NEWLINE or EOF, or the next token is one."""
        ends = (TokenKind.NEWLINE, TokenKind.EOF)
        return self.current().kind in ends or self.peek().kind in ends

    def block_column(self) -> int:
        """
        Returns the smallest column a token may start at to belong to the current depth.

        Columns are 1-based and a tab is `INDENT_WIDTH` wide, so `depth` tabs
        put the first token at `INDENT_WIDTH * depth + 1`.
        """
        return INDENT_WIDTH * self.depth + 1

    def next_significant(self, index: int) -> int:
        """Returns the index of the first token at or after `index` that is not layout."""
        last = len(self.tokens) - 1
        while index < last and self.tokens[index].kind in LAYOUT_TOKENS:
            index += 1
        return min(index, last)

    def current_precedence(self) -> Precedence:
        """Binding strength of the current token, LOWEST if it is not an infix operator."""
        return PRECEDENCES.get(self.current().kind, Precedence.LOWEST)

    def peek_precedence(self) -> Precedence:
        """Binding strength of the next token, LOWEST if it is not an infix operator."""
        return PRECEDENCES.get(self.peek().kind, Precedence.LOWEST)

    def expect_peek(self, kind: TokenKind) -> bool:
        """
        Advances onto the next token if it has the expected kind.

        Args:
            kind (TokenKind): The kind the next token must have.

        Returns:
            bool: True if the cursor moved, False if a diagnostic was recorded instead.
        """
        if self.peek().kind is kind:
            self.advance()
            return True
        self.peek_error(kind)
        return False

    # Diagnostics

    def peek_error(self, kind: TokenKind) -> None:
        """Records that the next token was not of the expected `kind`."""
        tok = self.peek()
        self.errors.append(
            f"expected next token to be {kind} at {tok.position}, got {tok.kind} instead"
        )

    def no_prefix_error(self, tok: Token) -> None:
        """Records that `tok` cannot begin an expression."""
        self.errors.append(
            f"no prefix parse function for {tok.kind} found at {tok.position}"
        )

    # Statements

    def parse(self) -> list[Statement]:
        """Parse the whole token list and return the top-level statements."""
        statements: list[Statement] = []
        while not self.at_end():
            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)
            self.advance()
        return statements

    def parse_program(self) -> Program:
        return Program(self.parse())

    def parse_statement(self) -> Statement | None:
        tok = self.current()
        if tok.kind is TokenKind.IDENT and self.peek().kind is TokenKind.ASSIGN:
            return self.parse_var_binding()
        if tok.kind in LAYOUT_TOKENS:
            return None
        return self.parse_expression_statement()

    def parse_var_binding(self) -> VarBinding:
        name_tok = self.current()
        self.advance()  # '='
        self.advance()
        value = self.parse_expression(Precedence.LOWEST)
        # The rest of the line belongs to the binding; a failed value may
        # already have left the cursor on the NEWLINE
        while not self.at_line_end():
            self.advance()
        return VarBinding(name_tok.text, value, name_tok.line, name_tok.col)

    def parse_expression_statement(self) -> ExpressionStatement | None:
        tok = self.current()
        expr = self.parse_expression(Precedence.LOWEST)
        if expr is None:
            return None
        return ExpressionStatement(expr, tok.line, tok.col)

    def parse_block(self) -> Block:
        """Parse an indented block, starting with the cursor on the newline that opens it.

        The block ends at the first significant token whose column is below
        `block_column()` for the new depth, which is left unconsumed.
        """
        self.depth += 1
        threshold = self.block_column()
        first = self.tokens[self.next_significant(self.position + 1)]
        block = Block([], first.line, first.col)
        while True:
            index = self.next_significant(self.position + 1)
            tok = self.tokens[index]
            if tok.kind is TokenKind.EOF or tok.col < threshold:
                break
            self.position = index
            stmt = self.parse_statement()
            if stmt is not None:
                block.statements.append(stmt)
        self.depth -= 1
        return block

    # Expressions

    def parse_expression(self, precedence: Precedence) -> Expression | None:
        tok = self.current()
        prefix = self.prefix_fns.get(tok.kind)
        if prefix is None:
            self.no_prefix_error(tok)
            return None
        left = prefix()

        while (
            self.current().kind is not TokenKind.NEWLINE
            and self.peek().kind not in (TokenKind.NEWLINE, TokenKind.EOF)
            and precedence < self.peek_precedence()
        ):
            infix = self.infix_fns.get(self.peek().kind)
            if infix is None:
                return left
            self.advance()
            left = infix(left)
        return left

    def parse_identifier(self) -> Expression:
        tok = self.current()
        return Identifier(tok.text, tok.line, tok.col)

    def parse_int_literal(self) -> Expression | None:
        tok = self.current()
        try:
            value = int(tok.text, 10)
        except ValueError:
            value = None
        if value is None or not INT64_MIN <= value <= INT64_MAX:
            self.errors.append(
                f'could not parse "{tok.text}" as integer at {tok.position}'
            )
            return None
        return IntLiteral(value, tok.line, tok.col)

    def parse_string_literal(self) -> Expression:
        tok = self.current()
        return StringLiteral(tok.text, tok.line, tok.col)

    def parse_prefix_op(self) -> Expression:
        tok = self.current()
        self.advance()
        operand = self.parse_expression(Precedence.PREFIX)
        return PrefixOp(tok.text, operand, tok.line, tok.col)

    def parse_infix_op(self, left: Expression | None) -> Expression:
        tok = self.current()
        precedence = self.current_precedence()
        self.advance()
        right = self.parse_expression(precedence)
        return InfixOp(tok.text, left, right, tok.line, tok.col)

    def parse_grouping(self) -> Expression | None:
        self.advance()
        expr = self.parse_expression(Precedence.LOWEST)
        if not self.expect_peek(TokenKind.RPAREN):
            return None
        return expr

    def parse_call(self, callee: Expression | None) -> Expression:
        tok = self.current()
        return Call(callee, self.parse_call_arguments(), tok.line, tok.col)

    def parse_call_arguments(self) -> list[Expression | None]:
        """Parse a comma-separated argument list; the cursor starts on `(`.

        A missing `)` is recorded and the arguments parsed so far are kept.
        """
        args: list[Expression | None] = []
        if self.peek().kind is TokenKind.RPAREN:
            self.advance()
            return args
        self.advance()
        args.append(self.parse_expression(Precedence.LOWEST))
        while self.peek().kind is TokenKind.COMMA:
            self.advance()
            self.advance()
            args.append(self.parse_expression(Precedence.LOWEST))
        self.expect_peek(TokenKind.RPAREN)
        return args

    def parse_if(self) -> Expression | None:
        """Parse `if cond:` NEWLINE block, then an optional `elif`/`else` branch.

        Also used for `elif`, which parses exactly like `if`.
        """
        tok = self.current()
        self.advance()
        condition = self.parse_expression(Precedence.LOWEST)
        if not self.expect_peek(TokenKind.COLON):
            return None
        if not self.expect_peek(TokenKind.NEWLINE):
            return None
        then_block = self.parse_block()
        else_block = self.parse_else()
        return If(condition, then_block, else_block, tok.line, tok.col)

    def parse_else(self) -> Block | None:
        index = self.next_significant(self.position + 1)
        tok = self.tokens[index]
        if tok.kind not in (TokenKind.ELSE, TokenKind.ELIF):
            return None
        if tok.col < self.block_column():
            return None
        self.position = index

        if tok.kind is TokenKind.ELIF:
            nested = self.parse_if()
            if nested is None:
                return None
            return Block([ExpressionStatement(nested, tok.line, tok.col)], tok.line, tok.col)

        if self.peek().kind is TokenKind.COLON:
            self.advance()
        if not self.expect_peek(TokenKind.NEWLINE):
            return None
        return self.parse_block()

    def parse_while(self) -> Expression | None:
        tok = self.current()
        self.advance()
        condition = self.parse_expression(Precedence.LOWEST)
        if not self.expect_peek(TokenKind.COLON):
            return None
        if not self.expect_peek(TokenKind.NEWLINE):
            return None
        body = self.parse_block()
        return While(condition, body, tok.line, tok.col)


__all__ = ["Parser"]
