from datetime import datetime, timedelta
from typing import Optional

from invoice_bridge.core.clock import Clock, SystemClock


class AuthorizationGate:
    """Debounces consent redirects.

    A consent flow counts as in progress until the callback releases it or
    ``in_progress_seconds`` pass. New flows are also refused within
    ``cooldown_seconds`` of the previous start.
    """

    def __init__(
        self,
        cooldown_seconds: int = 5,
        in_progress_seconds: int = 10,
        clock: Optional[Clock] = None,
    ):
        self.cooldown = timedelta(seconds=cooldown_seconds)
        self.in_progress_window = timedelta(seconds=in_progress_seconds)
        self.clock = clock or SystemClock()
        self.last_started_at: Optional[datetime] = None
        self._in_progress_until: Optional[datetime] = None

    @property
    def in_progress(self) -> bool:
        return (
            self._in_progress_until is not None
            and self.clock.now() < self._in_progress_until
        )

    def try_begin(self) -> Optional[str]:
        """Claim the gate. Returns a refusal message, or None when claimed."""
        now = self.clock.now()

        if self.in_progress:
            return (
                "Authorization already in progress. "
                "Please wait and try again in a few seconds."
            )

        if self.last_started_at and now - self.last_started_at < self.cooldown:
            return "Please wait a few seconds before trying again."

        self.last_started_at = now
        self._in_progress_until = now + self.in_progress_window
        return None

    def release(self) -> None:
        self._in_progress_until = None
