"""
Lexical analyzer for the Tabby programming language.

This module converts normalized source text into a flat list of tokens:

Classes:
    CharacterStream: Stream abstraction for reading characters with line/column tracking.
    Position: Immutable 1-based source location.
    Token: Immutable token with kind, text, and source position.
    Lexer: Converts a CharacterStream into a list of tokens.

Features:
    - Skips spaces and `#` comments (the newline ending a comment is still emitted)
    - Emits NEWLINE tokens and one INDENT token per tab character
    - Recognizes two-character operators with one character of lookahead
    - Builds identifiers and integers through an explicit word accumulator, so a
      keyword prefix such as `if` in `iffy` never leaks into the token stream
    - Never raises: unknown characters and unterminated strings become ILLEGAL tokens

The lexer expects indentation to be normalized already (four spaces replaced
by a tab, see `tabby.tabby_loader.normalize_source`).

Example:
    >>> [t.kind.name for t in tokenize("x = 1")]
    ['IDENT', 'ASSIGN', 'INT', 'EOF']

Exports:
    - CharacterStream
    - Position
    - Token
    - Lexer
    - tokenize
"""

from dataclasses import dataclass

from tabby.tabby_constants import (
    INDENT_WIDTH,
    KEYWORDS,
    SINGLE_CHAR_TOKENS,
    TWO_CHAR_TOKENS,
    TokenKind,
)

DIGITS = "0123456789"


class CharacterStream:
    """
    A utility for reading characters from a string source with line and column tracking.

    A tab advances the column by a full indentation level (`INDENT_WIDTH`)
    instead of one, so columns reflect indentation depth.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Raises:
            Exception: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise Exception(
                f"CharacterStreamError: Attempted to read past end of source at position=<{self.position}>, line=<{self.line}>"
            )
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
            self.column = 1
        elif char == "\t":
            self.column += INDENT_WIDTH
        else:
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """Returns the character at `offset` without advancing, or "" when out of bounds."""
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


@dataclass(frozen=True, slots=True)
class Position:
    """Source location, 1-based line and column."""

    line: int
    column: int

    def __str__(self) -> str:
        return f"line {self.line}, column {self.column}"


@dataclass(frozen=True, slots=True, repr=False)
class Token:
    """Represents a single lexical token in the Tabby language.

    Attributes:
        kind (TokenKind): The token kind.
        text (str): The source text of the token (string literals without quotes).
        position (Position): Where the token's first character appears.
    """

    kind: TokenKind
    text: str
    position: Position = Position(0, 0)

    @property
    def line(self) -> int:
        return self.position.line

    @property
    def col(self) -> int:
        return self.position.column

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.text!r})"


class Lexer:
    """Lexical analyzer for the Tabby language.

    Words (identifiers and integers) are accumulated one character at a time.
    The accumulator holds the word's classification, text, and start position;
    the finished token is appended only when the classification changes or the
    input ends. Keyword lookup happens at that point, which is what lets `iffy`
    come out as a single identifier.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
        tokens (list[Token]): Tokens emitted so far.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream
        self.tokens: list[Token] = []
        self._word_kind: TokenKind | None = None
        self._word = ""
        self._word_start = Position(stream.line, stream.column)

    def peek(self, offset: int = 0) -> str:
        return self.stream.peek(offset)

    def advance(self) -> str:
        return self.stream.next()

    def here(self) -> Position:
        return Position(self.stream.line, self.stream.column)

    def emit(self, kind: TokenKind, text: str, position: Position) -> None:
        self.tokens.append(Token(kind, text, position))

    def tokenize(self) -> list[Token]:
        """Consumes the whole stream and returns the token list, ending with EOF."""
        while not self.stream.end_of_file():
            ch = self.peek()
            if ch.isalpha() or ch == "_":
                self.extend_word(TokenKind.IDENT)
            elif ch in DIGITS:
                # Digits continue an identifier, otherwise they form an integer
                if self._word_kind is TokenKind.IDENT:
                    self.extend_word(TokenKind.IDENT)
                else:
                    self.extend_word(TokenKind.INT)
            else:
                self.finish_word()
                self.lex_symbol(ch)
        self.finish_word()
        self.emit(TokenKind.EOF, "", self.here())
        return self.tokens

    def extend_word(self, kind: TokenKind) -> None:
        """Adds the current character to the word accumulator.

        A change of classification (for example a letter right after digits)
        finishes the pending word first and starts a new one.
        """
        if self._word_kind is not kind:
            self.finish_word()
            self._word_kind = kind
            self._word_start = self.here()
        self._word += self.advance()

    def finish_word(self) -> None:
        """Emits the accumulated word, if any, and resets the accumulator."""
        if self._word_kind is None:
            return
        kind = self._word_kind
        if kind is TokenKind.IDENT:
            kind = KEYWORDS.get(self._word, TokenKind.IDENT)
        self.emit(kind, self._word, self._word_start)
        self._word_kind = None
        self._word = ""

    def lex_symbol(self, ch: str) -> None:
        """Handles one non-word character: layout, comments, strings, and operators."""
        start = self.here()

        if ch == "\n":
            self.emit(TokenKind.NEWLINE, self.advance(), start)
        elif ch == "\t":
            self.emit(TokenKind.INDENT, self.advance(), start)
        elif ch == "#":
            self.skip_comment()
        elif ch == '"':
            self.lex_string()
        elif ch.isspace():
            self.advance()
        elif ch + self.peek(1) in TWO_CHAR_TOKENS:
            text = self.advance() + self.advance()
            self.emit(TWO_CHAR_TOKENS[text], text, start)
        elif ch in SINGLE_CHAR_TOKENS:
            self.emit(SINGLE_CHAR_TOKENS[ch], self.advance(), start)
        else:
            self.emit(TokenKind.ILLEGAL, self.advance(), start)

    def skip_comment(self) -> None:
        """Advances to the end of the current line, leaving the newline in place."""
        while not self.stream.end_of_file() and self.peek() != "\n":
            self.advance()

    def lex_string(self) -> None:
        """Reads a double-quoted string literal; no escape processing.

        An unterminated literal becomes one ILLEGAL token at the opening quote
        that carries the rest of the input.
        """
        start = self.here()
        self.advance()
        value = ""
        while not self.stream.end_of_file() and self.peek() != '"':
            value += self.advance()
        if self.stream.end_of_file():
            self.emit(TokenKind.ILLEGAL, '"' + value, start)
            return
        self.advance()
        self.emit(TokenKind.STRING, value, start)


def tokenize(source: str) -> list[Token]:
    """Tokenizes normalized source text. The result always ends with one EOF token."""
    return Lexer(CharacterStream(source)).tokenize()


__all__ = ["CharacterStream", "Lexer", "Position", "Token", "tokenize"]
