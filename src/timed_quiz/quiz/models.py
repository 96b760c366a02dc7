"""Immutable quiz records, session enums and the quiz error hierarchy."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping

ALLOWED_TIME_LIMITS: tuple[int, ...] = (5, 10, 15, 60)
DEFAULT_TIME_LIMIT = 5


class QuizError(RuntimeError):
    """Base class for quiz failures surfaced to hosts."""


class EmptyBankError(QuizError):
    """Raised when there are no questions to run a session with."""

    def __init__(self, message: str = "No questions available.") -> None:
        super().__init__(message)


class InvalidOptionError(QuizError):
    """Raised by strict sessions for keys the current question lacks."""


class QuestionBankError(QuizError):
    """Raised when a question bank cannot be read or validated."""


class InvalidConfigurationError(QuizError, ValueError):
    """Raised when a quiz configuration holds an unsupported value."""


class Phase(Enum):
    CONFIGURING = "configuring"
    ACTIVE = "active"
    FINISHED = "finished"


class Feedback(Enum):
    NEUTRAL = "neutral"
    CORRECT = "correct"
    INCORRECT = "incorrect"


@dataclass(frozen=True)
class Question:
    """A multiple-choice question; ``options`` keeps its insertion order."""

    question_text: str
    options: Mapping[str, str]
    correct_answer: str

    def __post_init__(self) -> None:
        # Private copy: later edits to the caller's dict stay invisible.
        object.__setattr__(
            self, "options", MappingProxyType(dict(self.options))
        )

    def has_option(self, key: str) -> bool:
        return key in self.options

    def option_keys(self) -> tuple[str, ...]:
        return tuple(self.options)


@dataclass(frozen=True)
class QuizConfiguration:
    """Settings fixed for the lifetime of one session."""

    time_limit_minutes: int = DEFAULT_TIME_LIMIT
    randomize: bool = False

    def __post_init__(self) -> None:
        minutes = self.time_limit_minutes
        if (
            not isinstance(minutes, int)
            or isinstance(minutes, bool)
            or minutes not in ALLOWED_TIME_LIMITS
        ):
            allowed = ", ".join(str(value) for value in ALLOWED_TIME_LIMITS)
            raise InvalidConfigurationError(
                f"Unsupported time limit {self.time_limit_minutes!r}; "
                f"expected one of: {allowed}."
            )

    @property
    def time_limit_seconds(self) -> int:
        return self.time_limit_minutes * 60
