"""Fixed-rate pacing for loops."""

from __future__ import annotations

import time
from datetime import timedelta


class Metronome:
    """Paces a loop so that successive ticks are at least ``duration`` apart."""

    def __init__(self, duration: float | timedelta = 1 / 64) -> None:
        if isinstance(duration, timedelta):
            duration = duration.total_seconds()
        self.duration = float(duration)
        self._last_time = time.monotonic()

    def tick(self) -> None:
        """Sleep until one period after the previous tick, unless already late."""
        resume_time = self._last_time + self.duration
        current_time = time.monotonic()
        if current_time < resume_time:
            time.sleep(resume_time - current_time)
            self._last_time = resume_time
        else:
            self._last_time = current_time