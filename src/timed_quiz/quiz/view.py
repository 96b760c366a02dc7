"""Textual front end for a timed quiz session."""

from __future__ import annotations

import logging
import random
from typing import Dict, Mapping, Optional, Sequence

from textual.app import App, ComposeResult, ScreenStackError
from textual.binding import Binding
from textual.containers import Container, Vertical
from textual.css.query import NoMatches
from textual.timer import Timer
from textual.widget import Widget
from textual.widgets import Button, Static

from .countdown import format_remaining
from .models import Feedback, Phase, Question, QuizConfiguration
from .sequence import build_sequence
from .session import QuizSession


# n, r and q are taken by the app actions; digits pick options by position.
_OPTION_LETTERS = "abcdefghijklmopstuvwxyz"


class QuizApp(App):
    CSS_PATH = None
    CSS = """
#timer { text-style: bold; padding: 0 1; }
#options Button { width: 100%; }
#options Button.correct { background: $success; color: black; }
#options Button.incorrect { background: $error; color: black; }
"""
    BINDINGS = [
        ("n", "advance", "Next"),
        ("r", "restart", "Restart"),
        ("q", "quit", "Quit"),
        *[
            Binding(letter, f"select('{letter}')", letter.upper(), show=False)
            for letter in _OPTION_LETTERS
        ],
        *[
            Binding(str(number), f"select_position({number})", str(number),
                    show=False)
            for number in range(1, 10)
        ],
    ]

    def __init__(
        self,
        bank: Sequence[Question],
        config: QuizConfiguration,
        *,
        rng: Optional[random.Random] = None,
        log: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__()
        self._bank = tuple(bank)
        self._config = config
        self._rng = rng
        self._log = log
        self._timer: Optional[Timer] = None
        self._expired = False
        # Raises EmptyBankError before the app ever runs.
        self._session = self._new_session()

    @property
    def session(self) -> QuizSession:
        return self._session

    def compose(self) -> ComposeResult:
        yield Static(self.timer_text(), id="timer")
        with Container(id="stage"):
            yield self._stage_widget()

    def on_mount(self) -> None:
        self._start_timer()

    def _new_session(self) -> QuizSession:
        session = QuizSession(log=self._log)
        session.start(
            self._config,
            build_sequence(self._bank, self._config.randomize, rng=self._rng),
        )
        return session

    # Pure helpers (testable without running the App)
    def timer_text(self) -> str:
        remaining = self._session.remaining_seconds
        return f"Time Left: {format_remaining(remaining)}"

    def resolve_option_key(self, key: str) -> Optional[str]:
        """Match ``key`` against the current options, ignoring case."""

        question = self._session.current_question()
        if question is None:
            return None
        if question.has_option(key):
            return key
        for option_key in question.option_keys():
            if option_key.casefold() == key.casefold():
                return option_key
        return None

    def select_option(self, key: str) -> bool:
        session = self._session
        if session.phase is not Phase.ACTIVE or session.is_locked:
            return False
        option_key = self.resolve_option_key(key)
        if option_key is None:
            return False
        session.select_answer(option_key)
        self._update_stage()
        return True

    def select_position(self, position: int) -> bool:
        """Select the option at 1-based ``position``."""

        question = self._session.current_question()
        if question is None:
            return False
        keys = question.option_keys()
        if not 1 <= position <= len(keys):
            return False
        return self.select_option(keys[position - 1])

    def advance_question(self) -> None:
        self._session.advance()
        if self._session.phase is Phase.FINISHED:
            self._stop_timer()
        self._update_stage()

    def handle_tick(self) -> None:
        was_active = self._session.phase is Phase.ACTIVE
        self._session.tick()
        self._update_timer()
        if self._session.phase is Phase.FINISHED:
            self._expired = self._expired or was_active
            self._stop_timer()
            self._update_stage()

    def restart(self) -> None:
        """Replace the finished session with a brand new one."""

        if self._session.phase is not Phase.FINISHED:
            return
        self._session = self._new_session()
        self._expired = False
        self._start_timer()
        self._update_timer()
        self._update_stage()

    def _start_timer(self) -> None:
        self._stop_timer()
        self._timer = self.set_interval(1.0, self.handle_tick)

    def _stop_timer(self) -> None:
        if self._timer is not None:
            self._timer.stop()
            self._timer = None

    def _stage_widget(self) -> Widget:
        question = self._session.current_question()
        if self._session.phase is Phase.FINISHED or question is None:
            return FinishedView(expired=self._expired)
        return QuestionView(
            question,
            index=self._session.current_index + 1,
            total=self._session.total_questions,
            feedback={
                key: self._session.option_feedback(key)
                for key in question.options
            },
            locked=self._session.is_locked,
            is_last=self._session.is_last_question,
        )

    def _update_stage(self) -> None:
        try:
            stage = self.query_one("#stage", Container)
        except (NoMatches, ScreenStackError):
            return
        stage.remove_children()
        stage.mount(self._stage_widget())

    def _update_timer(self) -> None:
        try:
            label = self.query_one("#timer", Static)
        except (NoMatches, ScreenStackError):
            return
        label.update(self.timer_text())

    def action_select(self, key: str) -> None:
        self.select_option(key)

    def action_select_position(self, position: int) -> None:
        self.select_position(position)

    def action_advance(self) -> None:
        if self._session.is_locked:
            self.advance_question()

    def action_restart(self) -> None:
        self.restart()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        bid = getattr(event.button, "id", "") or ""
        if bid.startswith("option-"):
            self.select_position(int(bid.split("-", 1)[1]) + 1)
        elif bid == "advance":
            self.action_advance()
        elif bid == "restart":
            self.restart()
        elif bid == "quit":
            self.exit()


class QuestionView(Widget):
    """Renders one question, its options and the Next/Finish button."""

    def __init__(
        self,
        question: Question,
        index: int,
        total: int,
        *,
        feedback: Mapping[str, Feedback],
        locked: bool = False,
        is_last: bool = False,
    ) -> None:
        super().__init__()
        self.question = question
        self.index = index
        self.total = total
        self.feedback: Dict[str, Feedback] = dict(feedback)
        self.locked = locked
        self.is_last = is_last

    def compose(self) -> ComposeResult:
        yield Static(f"Question {self.index} of {self.total}", id="progress")
        yield Static(self.question.question_text, id="question")
        with Vertical(id="options"):
            for position, (key, text) in enumerate(
                self.question.options.items()
            ):
                button = Button(f"{key}. {text}", id=f"option-{position}")
                css_class = self.css_class_for(key)
                if css_class:
                    button.add_class(css_class)
                yield button
        if self.locked:
            yield Button(
                self.advance_label(), id="advance", variant="primary"
            )

    def css_class_for(self, key: str) -> str | None:
        status = self.feedback.get(key, Feedback.NEUTRAL)
        if status is Feedback.NEUTRAL:
            return None
        return status.value

    def advance_label(self) -> str:
        return "Finish" if self.is_last else "Next"


class FinishedView(Widget):
    def __init__(self, *, expired: bool = False) -> None:
        super().__init__()
        self.expired = expired

    def reason_text(self) -> str:
        return "Time's up!" if self.expired else "All questions answered."

    def compose(self) -> ComposeResult:
        yield Static("Quiz Finished!", id="finished-title")
        yield Static(self.reason_text(), id="finished-reason")
        yield Button("Restart", id="restart")
        yield Button("Quit", id="quit")
