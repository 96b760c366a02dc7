"""Quiz session state machine.

A :class:`QuizSession` moves through ``CONFIGURING -> ACTIVE -> FINISHED``.
Hosts drive it with :meth:`QuizSession.select_answer`,
:meth:`QuizSession.advance` and a once-per-second :meth:`QuizSession.tick`.
Operations that do not apply to the current phase are ignored rather than
raised, so late or out-of-order events from a UI are harmless. The only
error that stops a session from starting is :class:`EmptyBankError`.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .models import (
    EmptyBankError,
    Feedback,
    InvalidOptionError,
    Phase,
    Question,
    QuizConfiguration,
)

logger = logging.getLogger(__name__)


class QuizSession:
    """Mutable state for one run through a question sequence.

    Not thread-safe; callers serialize access (a single UI thread or event
    loop is enough).
    """

    def __init__(
        self,
        *,
        strict: bool = False,
        log: logging.Logger | None = None,
    ) -> None:
        self._strict = strict
        self._log = log or logger
        self._phase = Phase.CONFIGURING
        self._config: QuizConfiguration | None = None
        self._questions: tuple[Question, ...] = ()
        self._index = 0
        self._selected: str | None = None
        self._remaining = 0

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def config(self) -> QuizConfiguration | None:
        return self._config

    @property
    def ordered_questions(self) -> tuple[Question, ...]:
        return self._questions

    @property
    def total_questions(self) -> int:
        return len(self._questions)

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def selected_answer(self) -> str | None:
        return self._selected

    @property
    def remaining_seconds(self) -> int:
        return self._remaining

    @property
    def is_locked(self) -> bool:
        return self._selected is not None

    @property
    def is_last_question(self) -> bool:
        return self._index + 1 >= len(self._questions)

    def start(
        self,
        config: QuizConfiguration,
        ordered_questions: Sequence[Question],
    ) -> Phase:
        """Begin the countdown on the first question."""

        if self._phase is not Phase.CONFIGURING:
            self._ignored("start")
            return self._phase
        if not ordered_questions:
            raise EmptyBankError()

        self._config = config
        self._questions = tuple(ordered_questions)
        self._index = 0
        self._selected = None
        self._remaining = config.time_limit_seconds
        self._phase = Phase.ACTIVE
        self._log.info(
            "Quiz session started",
            extra={
                "event": "session_started",
                "questions": len(self._questions),
                "time_limit_minutes": config.time_limit_minutes,
                "randomize": config.randomize,
            },
        )
        return self._phase

    def select_answer(self, key: str) -> None:
        """Lock ``key`` as the answer to the current question.

        Only the first selection per question counts.
        """

        if self._phase is not Phase.ACTIVE or self._selected is not None:
            self._ignored("select_answer", key=key)
            return
        question = self._questions[self._index]
        if self._strict and not question.has_option(key):
            raise InvalidOptionError(
                f"'{key}' is not a valid option for question "
                f"{self._index + 1}."
            )
        self._selected = key
        self._log.info(
            "Answer locked",
            extra={
                "event": "answer_locked",
                "index": self._index,
                "key": key,
                "correct": key == question.correct_answer,
            },
        )

    def advance(self) -> None:
        """Move past a locked question, finishing after the last one."""

        if self._phase is not Phase.ACTIVE or self._selected is None:
            self._ignored("advance")
            return
        if self._index + 1 < len(self._questions):
            self._index += 1
            self._selected = None
            self._log.info(
                "Advanced to next question",
                extra={"event": "question_advanced", "index": self._index},
            )
            return
        self._finish("exhausted")

    def tick(self) -> None:
        """Consume one second of the countdown."""

        if self._phase is not Phase.ACTIVE:
            self._ignored("tick")
            return
        if self._remaining > 1:
            self._remaining -= 1
            return
        self._remaining = 0
        self._finish("expired")

    def current_question(self) -> Question | None:
        if self._index < len(self._questions):
            return self._questions[self._index]
        return None

    def option_feedback(self, key: str) -> Feedback:
        """Colour hint for ``key`` once the current question is answered."""

        question = self.current_question()
        if self._selected is None or question is None:
            return Feedback.NEUTRAL
        if key == question.correct_answer:
            return Feedback.CORRECT
        if key == self._selected:
            return Feedback.INCORRECT
        return Feedback.NEUTRAL

    def _finish(self, reason: str) -> None:
        self._phase = Phase.FINISHED
        self._log.info(
            "Quiz session finished",
            extra={
                "event": "session_finished",
                "reason": reason,
                "index": self._index,
                "remaining_seconds": self._remaining,
            },
        )

    def _ignored(self, operation: str, **details: object) -> None:
        self._log.debug(
            "Ignored %s in phase %s",
            operation,
            self._phase.value,
            extra={
                "event": "operation_ignored",
                "operation": operation,
                **details,
            },
        )
