from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, Iterator

import pytest

ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from timed_quiz.quiz.models import Question  # noqa: E402


QuestionFactory = Callable[..., Question]


@pytest.fixture(autouse=True)
def _isolated_env(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> Iterator[None]:
    """Keep user config and workspace out of every test."""

    for key in (
        "TIMED_QUIZ_CONFIG",
        "TIMED_QUIZ_TIME_LIMIT",
        "TIMED_QUIZ_RANDOMIZE",
        "TIMED_QUIZ_BANK",
        "TIMED_QUIZ_LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("TIMED_QUIZ_DATA_HOME", str(tmp_path / "workspace"))
    yield


@pytest.fixture
def make_question() -> QuestionFactory:
    def _make(
        text: str = "2+2?",
        options: dict[str, str] | None = None,
        correct: str = "B",
    ) -> Question:
        return Question(
            question_text=text,
            options=options if options is not None else {"A": "3", "B": "4"},
            correct_answer=correct,
        )

    return _make


@pytest.fixture
def bank(make_question: QuestionFactory) -> list[Question]:
    return [
        make_question(
            f"Question {n}",
            {"A": "alpha", "B": "bravo", "C": "charlie", "D": "delta"},
            "ABCD"[n % 4],
        )
        for n in range(1, 5)
    ]


class FakeClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
