"""
Interactive read-eval-print loop for LUMEN.

Each input line runs through the full pipeline (tokenize, parse, evaluate)
against one session environment. If tokenizing or parsing produced any
diagnostics they are printed and the line is not evaluated. Runtime faults
are printed and the session carries on.

Session commands (never reach the pipeline):
    #clear       clear the screen and forget every variable
    #show_tree   toggle printing tokens and the syntax tree
    #show_stack  toggle printing the environment after each result
    #exit        leave (``exit`` and ``quit`` work too)
"""

import logging

from lumen.lumen_diagnostics import DEFAULT_CONTEXT_WIDTH
from lumen.lumen_environment import Environment
from lumen.lumen_evaluator import EvaluationError, evaluate
from lumen.lumen_lexer import tokenize
from lumen.lumen_parser import parse
from lumen.lumen_values import EvaluationResult

logger = logging.getLogger("lumen.repl")
logger.addHandler(logging.NullHandler())

CLEAR_SCREEN = "\033[2J\033[H"
EXIT_COMMANDS = ("#exit", "exit", "quit")


class ReplSession:
    """State owned by one interactive session.

    Attributes:
        environment (Environment): Variables, kept across lines.
        show_tree (bool): Print tokens and the syntax tree for each line.
        show_stack (bool): Print the environment after each result.
        context_width (int): Characters shown on each side of a diagnostic.
    """

    def __init__(
        self,
        show_tree: bool = False,
        show_stack: bool = False,
        context_width: int = DEFAULT_CONTEXT_WIDTH,
        environment: Environment | None = None,
    ) -> None:
        self.environment = environment if environment is not None else Environment()
        self.show_tree = show_tree
        self.show_stack = show_stack
        self.context_width = context_width


def clear_screen() -> None:
    """Clears the terminal with an ANSI escape; assumes an ANSI-capable terminal."""
    print(CLEAR_SCREEN, end="", flush=True)


def handle_command(session: ReplSession, src: str) -> bool:
    """Applies a session command. Returns False if ``src`` is not one."""
    if src == "#clear":
        clear_screen()
        session.environment.clear()
        return True
    if src == "#show_tree":
        session.show_tree = not session.show_tree
        print(f"[mode] >>> Tree display {'ON' if session.show_tree else 'OFF'}")
        return True
    if src == "#show_stack":
        session.show_stack = not session.show_stack
        print(f"[mode] >>> Stack display {'ON' if session.show_stack else 'OFF'}")
        return True
    return False


def run_line(session: ReplSession, src: str) -> EvaluationResult | None:
    """Runs one line through the pipeline and prints the outcome.

    Returns the result, or None when diagnostics stopped evaluation.

    Raises:
        EvaluationError: If evaluation faults.
    """
    tokens, diagnostics = tokenize(src)
    if session.show_tree:
        print("Lexer tokens:")
        for token in tokens:
            print(f"  {token.position}: {token.syntax!r}")

    tree, parser_diagnostics = parse(tokens, src)
    diagnostics.merge(parser_diagnostics)
    if session.show_tree:
        print("Syntax tree:")
        print(tree.pretty())

    if diagnostics.has_errors():
        logger.debug("skipping evaluation, %d diagnostics", len(diagnostics))
        diagnostics.print(session.context_width)
        return None

    result = evaluate(tree, session.environment)
    print(f"Result: {result!r}")
    if session.show_stack:
        print("Stack:")
        if len(session.environment):
            print(session.environment.dump())
    return result


def start_repl(
    show_tree: bool = False,
    show_stack: bool = False,
    context_width: int = DEFAULT_CONTEXT_WIDTH,
) -> None:
    session = ReplSession(show_tree, show_stack, context_width)
    print("Lumen REPL. Type '#exit' to leave.")

    while True:
        try:
            src = input("> ").strip()
        except (KeyboardInterrupt, EOFError):
            print("\nExiting Lumen REPL.")
            break

        if not src:
            continue
        if src in EXIT_COMMANDS:
            print("Exiting Lumen REPL.")
            break
        if handle_command(session, src):
            continue
        if src.startswith("#"):
            continue

        try:
            run_line(session, src)
        except (EvaluationError, RecursionError) as e:
            print(f"[fault] >>> {e}")


def main() -> None:
    start_repl()


if __name__ == "__main__":
    main()
