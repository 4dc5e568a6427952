from datetime import datetime, timezone
from typing import Protocol


class Clock(Protocol):
    """Source of the current time for invoice dates and generated ids."""

    def now(self) -> datetime: ...


class SystemClock:
    """Wall-clock time in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """Clock frozen at a single instant, used by tests and replays."""

    def __init__(self, instant: datetime):
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        self.instant = instant

    def now(self) -> datetime:
        return self.instant


def epoch_millis(clock: Clock) -> int:
    return int(clock.now().timestamp() * 1000)
