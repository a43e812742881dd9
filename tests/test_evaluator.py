import io
from typing import Any

import pytest
from hypothesis import given
from hypothesis import strategies as st

from tabby.tabby_ast import Identifier, IntLiteral, Node, VarBinding
from tabby.tabby_evaluator import Evaluator, TabbyRuntimeError, display, is_truthy
from tabby.tabby_loader import parse_source


def run(source: str, env: dict[str, Any] | None = None, out: io.StringIO | None = None) -> Any:
    program, errors = parse_source(source)
    assert errors == []
    return Evaluator(env, out or io.StringIO()).run(program.statements)


@pytest.mark.parametrize(
    "source,expected",
    [
        ("1 + 2 * 3", 7),
        ("(1 + 2) * 3", 9),
        ("-4 + 10", 6),
        ("10 - 2 - 3", 5),
        ("7 / 2", 3),
        ("-7 / 2", -3),
        ("7 % 3", 1),
        ("7 % -3", 1),
        ("-7 % 3", -1),
        ("1 < 2", True),
        ("2 <= 1", False),
        ("3 > 2", True),
        ("3 >= 4", False),
        ("1 == 1", True),
        ("1 != 1", False),
        ('"a" + "b"', "ab"),
        ('"n" + 1', "n1"),
        ('1 + "n"', "1n"),
        ('"a" == "a"', True),
        ('"a" != "a"', False),
        ("1 < 2 == 2 < 3", True),
        ("(1 < 2) and (2 > 3)", False),
        ("(1 > 2) or (2 < 3)", True),
        ("1 and 0", False),
        ('0 or "x"', True),
        ('len("four")', 4),
    ],
)
def test_expressions(source: str, expected: Any) -> None:
    assert run(source) == expected


def test_bindings_persist_in_env() -> None:
    env: dict[str, Any] = {}
    assert run("a = 5\nb = a * 2", env) == 10
    assert env == {"a": 5, "b": 10}


def test_env_shared_across_runs() -> None:
    env: dict[str, Any] = {}
    run("x = 2", env)
    assert run("x + 5", env) == 7


def test_compound_assignment_updates_binding() -> None:
    env: dict[str, Any] = {}
    assert run("x = 10\nx += 4\nx -= 1\nx *= 2\nx /= 4\nx %= 4", env) == 2
    assert env["x"] == 2


def test_compound_assignment_requires_identifier() -> None:
    with pytest.raises(TabbyRuntimeError, match="cannot assign"):
        run("1 += 2")


def test_if_else_evaluation() -> None:
    source = "x = 3\nif x < 1:\n\ty = 1\nelif x < 5:\n\ty = 2\nelse:\n\ty = 3\ny"
    assert run(source) == 2


def test_if_without_else_is_none() -> None:
    assert run("if 0:\n\t1\n") is None


def test_while_loop_runs_until_false() -> None:
    env: dict[str, Any] = {}
    assert run("i = 0\nwhile i < 5:\n\ti += 1\n", env) == 5
    assert env["i"] == 5


def test_while_that_never_runs_is_none() -> None:
    assert run("while 1 > 2:\n\tx = 1\n") is None


def test_print_writes_to_out() -> None:
    out = io.StringIO()
    result = run('print("hi", 1 + 1, 1 < 2)\nprint()', out=out)
    assert result is None
    assert out.getvalue() == "hi 2 true\n\n"


def test_print_inside_loop() -> None:
    out = io.StringIO()
    run("i = 0\nwhile i < 3:\n\tprint(i)\n\ti += 1\n", out=out)
    assert out.getvalue() == "0\n1\n2\n"


def test_unknown_identifier() -> None:
    with pytest.raises(TabbyRuntimeError, match="identifier not found: y at line 1, col 1"):
        run("y")


def test_calling_non_function() -> None:
    with pytest.raises(TabbyRuntimeError, match="not a function: INT"):
        run("x = 1\nx(2)")


def test_len_rejects_non_string() -> None:
    with pytest.raises(TabbyRuntimeError, match="len expects one STR argument"):
        run("len(1)")


def test_division_by_zero() -> None:
    with pytest.raises(TabbyRuntimeError, match="division by zero"):
        run("1 / 0")


def test_unknown_operator_types() -> None:
    with pytest.raises(TabbyRuntimeError, match="unknown operator: STR - STR"):
        run('"a" - "b"')
    with pytest.raises(TabbyRuntimeError, match="unknown operator: -STR"):
        run('-"a"')


def test_and_or_share_comparison_precedence() -> None:
    # ((1 < 2) and 0) < 1
    with pytest.raises(TabbyRuntimeError, match="unknown operator: BOOL < INT"):
        run("1 < 2 and 0 < 1")


def test_incomplete_tree_raises() -> None:
    with pytest.raises(TabbyRuntimeError, match="incomplete"):
        Evaluator().evaluate(VarBinding("x", None))


def test_unknown_node_kind_raises() -> None:
    with pytest.raises(NotImplementedError, match="node kind 'node'"):
        Evaluator().evaluate(Node(1, 1))


def test_env_shadows_builtins() -> None:
    env: dict[str, Any] = {"len": 3}
    assert Evaluator(env).evaluate(Identifier("len")) == 3


def test_evaluate_single_nodes() -> None:
    assert Evaluator().evaluate(IntLiteral(42)) == 42


def test_display_and_truthiness() -> None:
    assert display(True) == "true"
    assert display(False) == "false"
    assert display(None) == "null"
    assert display(5) == "5"
    assert display(print) == "builtin function"
    assert is_truthy(1) and is_truthy("x") and is_truthy(True)
    assert not is_truthy(0) and not is_truthy("") and not is_truthy(None)


@given(st.integers(min_value=-1000, max_value=1000), st.integers(min_value=1, max_value=1000))  # type: ignore[misc]
def test_truncating_division_identity(a: int, b: int) -> None:
    env: dict[str, Any] = {"a": a, "b": b}
    q = run("a / b", env)
    r = run("a % b", env)
    assert q * b + r == a
    assert abs(r) < b
