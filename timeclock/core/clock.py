from datetime import datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """Kiosk wall clock. Shift dates are local calendar dates, so this is naive local time."""

    def now(self) -> datetime:
        return datetime.now()


class FixedClock:
    """Clock pinned to a given instant; moved explicitly with set() / advance()."""

    def __init__(self, current: datetime) -> None:
        self._current = current

    def now(self) -> datetime:
        return self._current

    def set(self, current: datetime) -> None:
        self._current = current

    def advance(self, delta: timedelta) -> datetime:
        self._current = self._current + delta
        return self._current
