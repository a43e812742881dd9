"""
Source loading and the one-call parse pipeline.

The lexer measures indentation in tabs, so source text must be normalized
before tokenizing: every run of four spaces becomes one tab. This module owns
that step and the file I/O around it.

Functions:
    normalize_source(text) -> str
    load_source(path) -> str
    parse_source(text) -> tuple[Program, list[str]]
    parse_file(path) -> tuple[Program, list[str]]

Raises:
    OSError: If a source file cannot be opened or read. This is not a parse
        diagnostic and is left to the caller.
"""

from tabby.tabby_ast import Program
from tabby.tabby_lexer import tokenize
from tabby.tabby_parser import Parser

SPACES_PER_TAB = " " * 4


def normalize_source(text: str) -> str:
    """Replaces each run of four spaces with a single tab character."""
    return text.replace(SPACES_PER_TAB, "\t")


def load_source(path: str) -> str:
    with open(path, encoding="utf-8") as f:
        return f.read()


def parse_source(text: str) -> tuple[Program, list[str]]:
    """
    Normalize, tokenize and parse source text.

    Args:
        text (str): Raw source text.

    Returns:
        tuple[Program, list[str]]: The parsed program and the parser's
        diagnostics. Statements that parsed cleanly are present even when
        diagnostics exist.
    """
    parser = Parser(tokenize(normalize_source(text)))
    program = parser.parse_program()
    return program, parser.errors


def parse_file(path: str) -> tuple[Program, list[str]]:
    return parse_source(load_source(path))


__all__ = ["load_source", "normalize_source", "parse_file", "parse_source"]
