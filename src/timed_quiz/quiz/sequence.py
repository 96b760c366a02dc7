"""Build the ordered question sequence for a single session."""

from __future__ import annotations

import random
from collections.abc import Sequence

from .models import EmptyBankError, Question


def build_sequence(
    bank: Sequence[Question],
    randomize: bool,
    *,
    rng: random.Random | None = None,
) -> list[Question]:
    """Return a fresh list of ``bank``'s questions for one session.

    The caller's ``bank`` is never reordered, so the same bank can be
    replayed in its original order after a randomized run. With
    ``randomize`` the copy is shuffled with ``random.Random.shuffle``
    (Fisher-Yates), giving every permutation equal probability. A new
    generator is created per call unless ``rng`` is supplied.
    """

    if not bank:
        raise EmptyBankError()
    ordered = list(bank)
    if randomize:
        (rng or random.Random()).shuffle(ordered)
    return ordered
