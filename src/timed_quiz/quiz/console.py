"""Rich-powered line-mode host for a timed quiz session.

The loop renders the current question, waits for a command, then replays
the seconds that elapsed while waiting through :class:`ElapsedTicker`
before applying the command, so an expired countdown always wins over a
late answer.
"""

from __future__ import annotations

import logging
import random
import time
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Callable, Literal

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .countdown import Clock, ElapsedTicker, format_remaining
from .models import (
    Feedback,
    InvalidOptionError,
    Phase,
    Question,
    QuizConfiguration,
)
from .sequence import build_sequence
from .session import QuizSession

InputProvider = Callable[[], str]
ExitAction = Literal["finished", "quit"]

_FEEDBACK_STYLES = {
    Feedback.CORRECT: "bold green",
    Feedback.INCORRECT: "bold red",
}


@dataclass(frozen=True)
class SessionCommand:
    """Normalized user command parsed from console input."""

    type: Literal["select", "next", "time", "quit"]
    choice: str | None = None


@dataclass(frozen=True)
class ConsoleRunResult:
    """Return value from ``run_console_session``."""

    session: QuizSession
    exit_action: ExitAction


def parse_session_command(
    raw: str | None, option_keys: Sequence[str] = ()
) -> SessionCommand | None:
    """Parse console input; option keys take priority over command words."""

    if raw is None:
        return None
    text = raw.strip()
    if not text:
        return None
    for key in option_keys:
        if text.casefold() == key.casefold():
            return SessionCommand("select", key)
    lowered = text.lower()
    if lowered in {"n", "next", "finish"}:
        return SessionCommand("next")
    if lowered in {"t", "time"}:
        return SessionCommand("time")
    if lowered in {"q", "quit", "exit"}:
        return SessionCommand("quit")
    return None


def run_console_session(
    bank: Sequence[Question],
    config: QuizConfiguration,
    console: Console,
    input_provider: InputProvider,
    *,
    clock: Clock = time.monotonic,
    rng: random.Random | None = None,
    log: logging.Logger | None = None,
) -> ConsoleRunResult:
    """Play one session in the terminal.

    Raises :class:`EmptyBankError` before anything is rendered when
    ``bank`` is empty.
    """

    session = QuizSession(strict=True, log=log)
    session.start(config, build_sequence(bank, config.randomize, rng=rng))
    ticker = ElapsedTicker(clock)
    ticker.start()

    exit_action: ExitAction = "finished"
    while session.phase is Phase.ACTIVE:
        _render_question(console, session)
        try:
            raw = input_provider()
        except (EOFError, KeyboardInterrupt, StopIteration):
            console.print("\n[bold yellow]Session interrupted.[/]")
            exit_action = "quit"
            break
        ticker.deliver(session)
        if session.phase is Phase.FINISHED:
            console.print("\n[bold red]Time's up![/]")
            break
        question = session.current_question()
        command = parse_session_command(
            raw, question.option_keys() if question else ()
        )
        if command is None:
            console.print("[red]Unrecognized command. Try again.[/]")
            continue
        if command.type == "quit":
            console.print("\n[bold yellow]Ending session early.[/]")
            exit_action = "quit"
            break
        _apply_command(command, session, console)

    ticker.stop()
    if session.phase is Phase.FINISHED:
        _render_finished(console, session)
    return ConsoleRunResult(session, exit_action)


def _apply_command(
    command: SessionCommand,
    session: QuizSession,
    console: Console,
) -> None:
    if command.type == "select" and command.choice is not None:
        if session.is_locked:
            console.print(
                "[yellow]Answer already locked for this question.[/]"
            )
            return
        try:
            session.select_answer(command.choice)
        except InvalidOptionError as exc:
            console.print(f"[red]{exc}[/red]")
            return
        _render_feedback(console, session)
        return
    if command.type == "next":
        if not session.is_locked:
            console.print("[yellow]Choose an answer first.[/]")
            return
        session.advance()
        return
    if command.type == "time":
        console.print(
            f"Time left: {format_remaining(session.remaining_seconds)}"
        )


def _render_question(console: Console, session: QuizSession) -> None:
    question = session.current_question()
    if question is None:
        return
    console.print()
    console.print(
        Text.assemble(
            ("Time Left: ", "bold"),
            (format_remaining(session.remaining_seconds), "cyan"),
        )
    )
    console.rule(
        Text.assemble(
            (f"Question {session.current_index + 1}", "bold cyan"),
            (f" of {session.total_questions}", "dim"),
        )
    )
    console.print(Text(question.question_text, style="bold"))
    console.print(_options_table(session, question))

    option_keys = question.option_keys()
    time_word = _command_word("t", "time", option_keys)
    quit_word = _command_word("q", "quit", option_keys)
    console.print(
        Text(
            f"Commands: options [{', '.join(option_keys)}], "
            f"{time_word} (time), {quit_word} (quit)",
            style="dim",
        )
    )


def _render_feedback(console: Console, session: QuizSession) -> None:
    question = session.current_question()
    if question is None:
        return
    console.print(_options_table(session, question))
    label = "Finish" if session.is_last_question else "Next"
    next_word = _command_word("n", "next", question.option_keys())
    console.print(Text(f"Press {next_word} for {label}.", style="bold"))


def _command_word(short: str, long: str, option_keys: Sequence[str]) -> str:
    """Short command letter unless an option key shadows it."""

    if any(key.casefold() == short for key in option_keys):
        return long
    return short


def _options_table(session: QuizSession, question: Question) -> Table:
    table = Table(show_header=False, box=box.SIMPLE, expand=True)
    table.add_column("Key", justify="center", style="cyan")
    table.add_column("Option")
    for key, text in question.options.items():
        marker = "•" if key == session.selected_answer else " "
        row = Text(f"{marker} ")
        style = _FEEDBACK_STYLES.get(session.option_feedback(key))
        row.append(text, style=style)
        table.add_row(f"{key}.", row)
    return table


def _render_finished(console: Console, session: QuizSession) -> None:
    console.print()
    console.print(
        Panel(
            f"Questions in this session: {session.total_questions}\n"
            f"Time left: {format_remaining(session.remaining_seconds)}",
            title="Quiz Finished!",
            border_style="magenta",
        )
    )
