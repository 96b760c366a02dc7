"""Load and validate question banks from JSON or JSON Lines files."""

from __future__ import annotations

import json
from collections.abc import Mapping
from importlib import resources
from pathlib import Path
from typing import Any, List

from .models import Question, QuestionBankError

SAMPLE_BANK = "sample_questions.json"


def load_bank(path: Path) -> tuple[Question, ...]:
    """Read every question from ``path``.

    ``.jsonl`` files hold one record per line. Anything else is parsed as a
    JSON document containing either a list of records or an object with a
    ``questions`` list. An empty bank is returned as-is; refusing to start
    on it is the sequence builder's job.
    """

    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise QuestionBankError(
            f"Unable to read question bank {path}: {exc}"
        ) from exc
    if path.suffix.lower() == ".jsonl":
        records = _parse_jsonl(text, path)
    else:
        records = _parse_json(text, path)
    return tuple(
        parse_question(record, index) for index, record in enumerate(records)
    )


def load_sample_bank() -> tuple[Question, ...]:
    """Return the bundled sample questions."""

    resource = resources.files(__package__).joinpath(SAMPLE_BANK)
    records = _parse_json(resource.read_text(encoding="utf-8"), SAMPLE_BANK)
    return tuple(
        parse_question(record, index) for index, record in enumerate(records)
    )


def parse_question(record: Any, index: int) -> Question:
    """Validate one raw bank record and return a ``Question``."""

    where = f"Question {index + 1}"
    if not isinstance(record, Mapping):
        raise QuestionBankError(f"{where}: expected an object.")

    text = record.get("question_text")
    if not isinstance(text, str) or not text.strip():
        raise QuestionBankError(f"{where}: 'question_text' must be text.")

    options = record.get("options")
    if not isinstance(options, Mapping) or not options:
        raise QuestionBankError(
            f"{where}: 'options' must be a non-empty mapping."
        )
    normalized: dict[str, str] = {}
    for key, value in options.items():
        if not isinstance(key, str) or not key.strip():
            raise QuestionBankError(f"{where}: option keys must be text.")
        if not isinstance(value, (str, int, float)) or isinstance(value, bool):
            raise QuestionBankError(
                f"{where}: option '{key}' must have text."
            )
        normalized[key.strip()] = str(value)

    answer = record.get("correct_answer")
    if isinstance(answer, str):
        answer = answer.strip()
    if not isinstance(answer, str) or answer not in normalized:
        keys = ", ".join(normalized)
        raise QuestionBankError(
            f"{where}: 'correct_answer' must be one of: {keys}."
        )
    return Question(
        question_text=text.strip(),
        options=normalized,
        correct_answer=answer,
    )


def _parse_json(text: str, source: object) -> List[Any]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise QuestionBankError(f"Invalid JSON in {source}: {exc}") from exc
    if isinstance(data, Mapping):
        data = data.get("questions")
    if not isinstance(data, list):
        raise QuestionBankError(
            f"{source} must contain a list of questions."
        )
    return data


def _parse_jsonl(text: str, source: object) -> List[Any]:
    records: List[Any] = []
    for number, line in enumerate(text.splitlines(), start=1):
        line = line.strip()
        if not line:
            continue
        try:
            records.append(json.loads(line))
        except json.JSONDecodeError as exc:
            raise QuestionBankError(
                f"Invalid JSON on line {number} of {source}: {exc}"
            ) from exc
    return records
