from __future__ import annotations

import pytest

from timed_quiz.quiz.models import (
    ALLOWED_TIME_LIMITS,
    EmptyBankError,
    InvalidConfigurationError,
    Question,
    QuizConfiguration,
    QuizError,
)


def test_question_options_are_frozen_copy() -> None:
    source = {"A": "yes", "B": "no"}
    question = Question("Ready?", source, "A")

    source["C"] = "maybe"

    assert question.option_keys() == ("A", "B")
    with pytest.raises(TypeError):
        question.options["D"] = "never"  # type: ignore[index]


def test_question_keeps_option_order() -> None:
    question = Question("Order?", {"C": "3", "A": "1", "B": "2"}, "A")
    assert question.option_keys() == ("C", "A", "B")
    assert question.has_option("B")
    assert not question.has_option("Z")


def test_question_equality_by_value() -> None:
    assert Question("Q", {"A": "x"}, "A") == Question("Q", {"A": "x"}, "A")


@pytest.mark.parametrize("minutes", ALLOWED_TIME_LIMITS)
def test_configuration_accepts_allowed_limits(minutes: int) -> None:
    config = QuizConfiguration(time_limit_minutes=minutes, randomize=True)
    assert config.time_limit_seconds == minutes * 60


@pytest.mark.parametrize("minutes", [0, 1, 20, -5, True, 5.0, "5"])
def test_configuration_rejects_other_limits(minutes) -> None:
    with pytest.raises(InvalidConfigurationError):
        QuizConfiguration(time_limit_minutes=minutes)


def test_configuration_defaults() -> None:
    config = QuizConfiguration()
    assert config.time_limit_minutes == 5
    assert config.randomize is False


def test_error_hierarchy() -> None:
    assert issubclass(EmptyBankError, QuizError)
    assert issubclass(InvalidConfigurationError, ValueError)
    assert str(EmptyBankError()) == "No questions available."
