"""Countdown helpers for hosts that cannot run a real periodic timer."""

from __future__ import annotations

import time
from typing import Callable

from .models import Phase
from .session import QuizSession

Clock = Callable[[], float]


def format_remaining(seconds: int) -> str:
    """Render a countdown as ``M:SS``."""

    seconds = max(0, int(seconds))
    minutes, secs = divmod(seconds, 60)
    return f"{minutes}:{secs:02d}"


class ElapsedTicker:
    """Turn wall-clock time into whole-second ``tick()`` calls.

    A blocking console loop cannot be interrupted every second, so it calls
    :meth:`deliver` whenever it regains control and the ticker replays the
    seconds that passed in the meantime. Fractions carry over to the next
    call. Once the session is finished the ticker stops itself.
    """

    def __init__(self, clock: Clock = time.monotonic) -> None:
        self._clock = clock
        self._anchor: float | None = None

    @property
    def running(self) -> bool:
        return self._anchor is not None

    def start(self) -> None:
        self._anchor = self._clock()

    def stop(self) -> None:
        self._anchor = None

    def pending(self) -> int:
        """Whole seconds elapsed since the last delivered tick."""

        if self._anchor is None:
            return 0
        return max(0, int(self._clock() - self._anchor))

    def deliver(self, session: QuizSession) -> int:
        """Apply pending ticks; returns how many were applied."""

        due = self.pending()
        delivered = 0
        while delivered < due and session.phase is Phase.ACTIVE:
            session.tick()
            delivered += 1
        if self._anchor is not None:
            self._anchor += delivered
        if session.phase is not Phase.ACTIVE:
            self.stop()
        return delivered
