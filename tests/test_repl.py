import builtins
from collections.abc import Iterator
from typing import Any

import pytest

import tabby.tabby_repl
from tabby.tabby_repl import eval_chunk, start_repl


def feed(monkeypatch: pytest.MonkeyPatch, lines: list[str]) -> list[str]:
    """Replaces `input` with one that yields `lines`, then raises EOFError. Returns the prompts seen."""
    it: Iterator[str] = iter(lines)
    prompts: list[str] = []

    def fake_input(prompt: str = "") -> str:
        prompts.append(prompt)
        try:
            return next(it)
        except StopIteration:
            raise EOFError from None

    monkeypatch.setattr(builtins, "input", fake_input)
    return prompts


def output_lines(capsys: pytest.CaptureFixture[str]) -> list[str]:
    return capsys.readouterr().out.splitlines()


def test_quit_and_exit(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    for word in ("quit", "exit", "  exit  "):
        feed(monkeypatch, [word])
        start_repl()
        assert output_lines(capsys) == [
            "Tabby REPL. Type 'exit' or 'quit' to leave.",
            "Exiting Tabby REPL.",
        ]


def test_eof_exits(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    feed(monkeypatch, [])
    start_repl()
    assert output_lines(capsys)[-1] == "Exiting Tabby REPL."


def test_keyboard_interrupt_exits(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    def interrupt(prompt: str = "") -> str:
        raise KeyboardInterrupt

    monkeypatch.setattr(builtins, "input", interrupt)
    start_repl()
    assert output_lines(capsys)[-1] == "Exiting Tabby REPL."


def test_bindings_persist_between_chunks(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    feed(monkeypatch, ["x = 2", "x + 5", "quit"])
    start_repl()
    assert output_lines(capsys)[1:3] == ["2", "7"]


def test_block_chunk_reads_until_blank_line(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    prompts = feed(monkeypatch, ["i = 0", "while i < 3:", "    i += 1", "", "i", "quit"])
    start_repl()
    assert output_lines(capsys)[1:4] == ["0", "3", "3"]
    assert prompts == [">>> ", ">>> ", "... ", "... ", ">>> ", ">>> "]


def test_diagnostics_are_printed(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    feed(monkeypatch, ["if x", "quit"])
    start_repl()
    assert output_lines(capsys)[1:3] == [
        "[error] >>>",
        "\texpected next token to be : at line 1, column 5, got EOF instead",
    ]


def test_runtime_error_is_printed(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    feed(monkeypatch, ["y", "1", "quit"])
    start_repl()
    assert output_lines(capsys)[1:4] == [
        "[error] >>>",
        "identifier not found: y at line 1, col 1",
        "1",
    ]


def test_verbose_mode_toggle(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    feed(monkeypatch, ["verbose-mode", "1 + 2", "verbose-mode", "3", "quit"])
    start_repl()
    assert output_lines(capsys)[1:6] == [
        "[mode] >>> Verbose mode ON",
        "[tree] >>> (1 + 2)",
        "3",
        "[mode] >>> Verbose mode OFF",
        "3",
    ]


def test_comments_and_blank_lines_skipped(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    feed(monkeypatch, ["# note", "", "quit"])
    start_repl()
    assert output_lines(capsys) == [
        "Tabby REPL. Type 'exit' or 'quit' to leave.",
        "Exiting Tabby REPL.",
    ]


def test_unexpected_exception_prints_traceback(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    def boom(src: str, env: dict[str, Any], verbose: bool = False) -> Any:
        raise ValueError("boom")

    monkeypatch.setattr(tabby.tabby_repl, "eval_chunk", boom)
    feed(monkeypatch, ["1", "quit"])
    start_repl()
    out = capsys.readouterr().out
    assert "[error] >>>" in out
    assert "ValueError: boom" in out
    assert out.rstrip().endswith("Exiting Tabby REPL.")


def test_eval_chunk_returns_result(capsys: pytest.CaptureFixture[str]) -> None:
    env: dict[str, Any] = {}
    assert eval_chunk("a = 4", env) == 4
    assert eval_chunk('print("a")', env) is None
    assert eval_chunk("a * a", env, verbose=True) == 16
    assert capsys.readouterr().out.splitlines() == ["4", "a", "[tree] >>> (a * a)", "16"]
    assert env == {"a": 4}
