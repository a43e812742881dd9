import os
from collections.abc import Callable

import pytest

from tabby.tabby_ast import Statement
from tabby.tabby_lexer import tokenize
from tabby.tabby_parser import Parser

# Collect coverage from CLI subprocesses when requested
if os.getenv("COVERAGE_PROCESS_START"):
    import coverage

    coverage.process_startup()


ParseFn = Callable[[str], tuple[list[Statement], list[str]]]


@pytest.fixture  # type: ignore[misc]
def parse() -> ParseFn:
    """Tokenizes and parses already-normalized source, returning (statements, errors)."""

    def _parse(source: str) -> tuple[list[Statement], list[str]]:
        parser = Parser(tokenize(source))
        statements = parser.parse()
        return statements, parser.errors

    return _parse
