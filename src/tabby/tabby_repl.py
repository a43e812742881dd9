"""
Interactive read-eval-print loop for Tabby.

Each input chunk goes through the same pipeline as a file: normalize,
tokenize, parse, evaluate. A chunk is one line, or, when the first line ends
with `:`, every line up to the next blank line. Variable bindings persist
across chunks in one environment owned by the REPL session; every chunk gets
a fresh parser.

Commands:
    exit / quit     leave the REPL
    verbose-mode    toggle printing of the parsed tree before evaluation
"""

import io
import traceback
from typing import Any

from tabby.tabby_evaluator import Evaluator, TabbyRuntimeError, display
from tabby.tabby_loader import parse_source


def print_traceback() -> None:
    buf = io.StringIO()
    traceback.print_exc(file=buf)
    print("[error] >>>")
    print(buf.getvalue())


def print_diagnostics(errors: list[str]) -> None:
    print("[error] >>>")
    for err in errors:
        print(f"\t{err}")


def eval_chunk(src: str, env: dict[str, Any], verbose: bool = False) -> Any:
    """
    Parse and evaluate one chunk of REPL input against `env`.

    Diagnostics and runtime errors are printed and nothing is returned; a
    non-None result is printed in display form and returned.
    """
    program, errors = parse_source(src)
    if errors:
        print_diagnostics(errors)
        return None
    if verbose:
        print(f"[tree] >>> {program}")
    try:
        result = Evaluator(env).run(program.statements)
    except TabbyRuntimeError as e:
        print("[error] >>>")
        print(e)
        return None
    if result is not None:
        print(display(result))
    return result


def read_chunk() -> str | None:
    """Reads one chunk of input. Returns None when the user asked to leave."""
    src_lines: list[str] = []
    while True:
        prompt = ">>> " if not src_lines else "... "
        line = input(prompt)
        if line.strip() in ("exit", "quit") and not src_lines:
            return None
        if src_lines and not line.strip():
            break
        src_lines.append(line)
        if not src_lines[0].rstrip().endswith(":"):
            break
    return "\n".join(src_lines)


def start_repl(verbose: bool = False) -> None:
    print("Tabby REPL. Type 'exit' or 'quit' to leave.")
    env: dict[str, Any] = {}

    while True:
        try:
            src = read_chunk()
            if src is None:
                print("Exiting Tabby REPL.")
                return
            if not src.strip() or src.strip().startswith("#"):
                continue
            if src.strip().lower() == "verbose-mode":
                verbose = not verbose
                print(f"[mode] >>> Verbose mode {'ON' if verbose else 'OFF'}")
                continue
            eval_chunk(src, env, verbose)
        except (KeyboardInterrupt, EOFError):
            print("\nExiting Tabby REPL.")
            break
        except Exception:
            print_traceback()


def main() -> None:
    start_repl()


if __name__ == "__main__":
    main()
