"""
LUMEN CLI Entrypoint.

This module provides the command-line interface for running LUMEN source.

Features:
    - Read source from `.lumen` files or inline strings.
    - Run each non-blank line through tokenize -> parse -> evaluate against
      one shared environment, exactly as if it had been typed into the REPL.
    - Optionally print tokens/trees and the final environment.
    - Launch an interactive REPL.

Example usage:
    lumen program.lumen
    lumen -s "let x = 5 + 5;" --stack
    lumen --repl --tree
    lumen program.lumen --log-level debug

Functions:
    run_lumen(source: str, is_string: bool = False, ...) -> bool:
        Runs the pipeline; returns False if any line failed.

    main() -> None:
        Parses CLI arguments and invokes the appropriate action (REPL or run).
"""

import argparse
import logging
import sys

from lumen.lumen_diagnostics import DEFAULT_CONTEXT_WIDTH
from lumen.lumen_evaluator import EvaluationError
from lumen.lumen_repl import ReplSession, run_line, start_repl

logger = logging.getLogger("lumen.cli")
logger.addHandler(logging.NullHandler())

LOG_LEVELS = ("debug", "info", "warning", "error")


def run_lumen(
    source: str,
    is_string: bool = False,
    show_tree: bool = False,
    show_stack: bool = False,
    context_width: int = DEFAULT_CONTEXT_WIDTH,
) -> bool:
    """
    Run LUMEN source line by line in a fresh session.

    Args:
        source (str): The LUMEN source code or path to a `.lumen` file.
        is_string (bool): If True, treats `source` as raw code instead of a file path.
        show_tree (bool): Print tokens and syntax trees for each line.
        show_stack (bool): Print the environment after each result.
        context_width (int): Characters of context shown around diagnostics.

    Returns:
        bool: True if every line evaluated, False if any line produced
        diagnostics or a runtime fault.

    Raises:
        ValueError: If `is_string` is False and the source does not end with '.lumen'.
    """
    if not is_string and not source.endswith(".lumen"):
        raise ValueError("Only .lumen files are supported.")
    if not is_string:
        with open(source, encoding="utf-8") as f:
            source = f.read()

    session = ReplSession(show_tree, show_stack, context_width)
    ok = True
    for number, line in enumerate(source.splitlines(), start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        logger.debug("line %d: %s", number, line)
        try:
            if run_line(session, line) is None:
                ok = False
        except (EvaluationError, RecursionError) as e:
            print(f"[fault] >>> line {number}: {e}", file=sys.stderr)
            ok = False
    return ok


def main() -> None:
    """
    Entry point for the LUMEN CLI.

    - Launches the REPL if no arguments are passed or `--repl` is specified.
    - Otherwise runs the given file (or string with `-s`) and exits with
      status 1 if any line failed.
    """
    parser = argparse.ArgumentParser(prog="lumen")
    parser.add_argument("source", nargs="?", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument(
        "--tree", action="store_true", help="Print tokens and syntax tree per line"
    )
    parser.add_argument(
        "--stack", action="store_true", help="Print variables after each result"
    )
    parser.add_argument(
        "--context-width",
        type=int,
        default=DEFAULT_CONTEXT_WIDTH,
        metavar="N",
        help=f"Characters of context around diagnostics (default: {DEFAULT_CONTEXT_WIDTH})",
    )
    parser.add_argument(
        "--repl", action="store_true", help="Launch interactive REPL instead of running"
    )
    parser.add_argument(
        "--log-level", choices=LOG_LEVELS, default="warning", help="Logging verbosity"
    )

    args = parser.parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.repl or args.source is None:
        start_repl(
            show_tree=args.tree,
            show_stack=args.stack,
            context_width=args.context_width,
        )
        return

    ok = run_lumen(
        source=args.source,
        is_string=args.string,
        show_tree=args.tree,
        show_stack=args.stack,
        context_width=args.context_width,
    )
    if not ok:
        sys.exit(1)


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    main()
