import builtins
from collections.abc import Iterator

import pytest

from lumen import lumen_repl
from lumen.lumen_evaluator import EvaluationError
from lumen.lumen_repl import (
    CLEAR_SCREEN,
    ReplSession,
    handle_command,
    run_line,
    start_repl,
)
from lumen.lumen_values import EvaluationResult, TypedValue


def feed(monkeypatch: pytest.MonkeyPatch, *lines: str) -> None:
    calls: Iterator[str] = iter(lines)

    def fake_input(_: str) -> str:
        try:
            return next(calls)
        except StopIteration:
            raise EOFError from None

    monkeypatch.setattr(builtins, "input", fake_input)


@pytest.mark.parametrize("command", ["quit", "exit", "#exit"])  # type: ignore[misc]
def test_repl_exit_commands(
    command: str, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    feed(monkeypatch, command)
    start_repl()
    out = capsys.readouterr().out
    assert "Lumen REPL" in out
    assert "Exiting Lumen REPL." in out


def test_repl_eof_exits(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    feed(monkeypatch)
    start_repl()
    assert "Exiting Lumen REPL." in capsys.readouterr().out


def test_repl_keyboard_interrupt_exits(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    def interrupt(_: str) -> str:
        raise KeyboardInterrupt

    monkeypatch.setattr(builtins, "input", interrupt)
    start_repl()
    assert "Exiting Lumen REPL." in capsys.readouterr().out


def test_repl_keeps_variables_between_lines(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    feed(monkeypatch, "let x = 5 + 5;", "", "x", "quit")
    start_repl()
    out = capsys.readouterr().out
    assert "Result: Null" in out
    assert "Result: Int(10)" in out


def test_repl_reports_fault_and_continues(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    feed(monkeypatch, "5 / 0", "1 + 1", "quit")
    start_repl()
    out = capsys.readouterr().out
    assert "[fault] >>> Cannot divide Int(5) by zero" in out
    assert "Result: Int(2)" in out


def test_repl_prints_diagnostics_without_evaluating(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    feed(monkeypatch, "let = 5;", "quit")
    start_repl()
    out = capsys.readouterr().out
    assert "Error: Expected identifier" in out
    assert "Result:" not in out


def test_repl_tree_mode(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    feed(monkeypatch, "#show_tree", "1", "#show_tree", "quit")
    start_repl()
    out = capsys.readouterr().out
    assert "[mode] >>> Tree display ON" in out
    assert "Lexer tokens:" in out
    assert "0: Token(LITERAL, INT, 1)" in out
    assert "Syntax tree:" in out
    assert "Expression(literal)" in out
    assert "[mode] >>> Tree display OFF" in out


def test_repl_stack_mode_and_clear(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    feed(monkeypatch, "#show_stack", "let y = 1;", "#clear", "y", "quit")
    start_repl()
    out = capsys.readouterr().out
    assert "[mode] >>> Stack display ON" in out
    assert "Stack:" in out
    assert "y: Int(1)" in out
    assert CLEAR_SCREEN in out
    assert "[fault] >>> Variable 'y' is not defined" in out


def test_repl_ignores_unknown_commands(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    feed(monkeypatch, "#bogus", "quit")
    start_repl()
    out = capsys.readouterr().out
    assert "Error:" not in out
    assert "Result:" not in out


def test_handle_command_rejects_plain_source() -> None:
    session = ReplSession()
    assert handle_command(session, "1 + 1") is False
    assert handle_command(session, "#show_stack") is True
    assert session.show_stack is True


def test_run_line_returns_result(capsys: pytest.CaptureFixture[str]) -> None:
    session = ReplSession()
    assert run_line(session, "let z = 'q';") == EvaluationResult.null()
    assert session.environment.lookup("z") == TypedValue.char("q")
    assert run_line(session, "1 +") is None
    out = capsys.readouterr().out
    assert "Error:" in out


def test_run_line_propagates_faults() -> None:
    with pytest.raises(EvaluationError):
        run_line(ReplSession(), "true + 1")


def test_main_starts_repl(monkeypatch: pytest.MonkeyPatch) -> None:
    called = []
    monkeypatch.setattr(lumen_repl, "start_repl", lambda: called.append(True))
    lumen_repl.main()
    assert called == [True]


def test_repl_survives_deeply_nested_input(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    chain = " + ".join(["1"] * 5000)
    feed(monkeypatch, "(" * 600 + "1" + ")" * 600, chain, "1 + 1", "quit")
    start_repl()
    out = capsys.readouterr().out
    assert "Error: ParserError" in out
    assert "[fault] >>> Expression nests too deeply to evaluate" in out
    assert "Result: Int(2)" in out
