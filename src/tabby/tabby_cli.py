"""
Tabby CLI Entrypoint.

This module provides the command-line interface for running Tabby source code.

Features:
    - Read source from a file or an inline string.
    - Normalize, tokenize and parse; report parser diagnostics on stderr.
    - Print the parsed tree (re-serialized or as JSON) instead of running it.
    - Evaluate the program.
    - Launch the interactive REPL.

Example usage:
    tabby hello.tb
    tabby -s "x = 1 + 2 * 3" --tree
    tabby program.tb --json
    tabby --repl --verbose

Functions:
    run_tabby(source: str, is_string: bool = False, show_tree: bool = False,
              as_json: bool = False) -> int:
        Executes the full Tabby pipeline and returns a process exit code.

    main(argv: list[str] | None = None) -> int:
        Parses CLI arguments and invokes the appropriate action (REPL or run).
"""

import argparse
import json
import sys

from tabby.tabby_evaluator import Evaluator, TabbyRuntimeError
from tabby.tabby_loader import load_source, parse_source


def run_tabby(
    source: str,
    is_string: bool = False,
    show_tree: bool = False,
    as_json: bool = False,
) -> int:
    """
    Run the Tabby toolchain: load, parse, and either print the tree or evaluate.

    Args:
        source (str): A path to a Tabby source file, or raw code when `is_string` is set.
        is_string (bool): If True, treats `source` as raw code instead of a file path.
        show_tree (bool): If True, prints the re-serialized program instead of running it.
        as_json (bool): If True, prints the program as JSON instead of running it.

    Returns:
        int: 0 on success, 1 if the parser reported diagnostics or evaluation failed.

    Raises:
        OSError: If the source file cannot be read.
    """
    # 1. Read source
    if not is_string:
        source = load_source(source)

    # 2. Lexing and parsing
    program, errors = parse_source(source)
    if errors:
        for err in errors:
            print(err, file=sys.stderr)
        return 1

    # 3. Output tree
    if as_json:
        print(json.dumps(program.to_dict(), indent=2))
        return 0
    if show_tree:
        print(program)
        return 0

    # 4. Evaluation
    try:
        Evaluator().run(program.statements)
    except TabbyRuntimeError as e:
        print(f"runtime error: {e}", file=sys.stderr)
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    """
    Entry point for the Tabby CLI.

    Launches the REPL if no arguments are passed or `--repl` is specified,
    otherwise runs `run_tabby` on the given source.

    Supported flags:
        - `-s`, `--string`: Interpret source as a raw string instead of a file path.
        - `--tree`: Print the parsed program instead of running it.
        - `--json`: Print the parsed program as JSON instead of running it.
        - `--repl`: Launch the interactive REPL.
        - `--verbose`: Enable verbose REPL mode.
    """
    args_list = sys.argv[1:] if argv is None else argv
    if not args_list:
        from tabby.tabby_repl import start_repl

        start_repl()
        return 0

    parser = argparse.ArgumentParser(prog="tabby")
    parser.add_argument("source", nargs="?", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument(
        "--tree", action="store_true", help="Print the parsed program instead of running it"
    )
    parser.add_argument(
        "--json", dest="as_json", action="store_true", help="Print the parsed program as JSON"
    )
    parser.add_argument(
        "--repl", action="store_true", help="Launch interactive REPL instead of running"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Verbose REPL mode (if --repl)"
    )

    args = parser.parse_args(args_list)

    if args.repl or args.source is None:
        from tabby.tabby_repl import start_repl

        start_repl(verbose=args.verbose)
        return 0

    return run_tabby(
        source=args.source,
        is_string=args.string,
        show_tree=args.tree,
        as_json=args.as_json,
    )


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    sys.exit(main())
