"""
Tests for the consent redirect gate.
"""

from datetime import datetime, timedelta, timezone

from invoice_bridge.domains.external_accounting.xero.auth.gate import AuthorizationGate


class SteppingClock:
    """Clock that only moves when told to."""

    def __init__(self) -> None:
        self.current = datetime(2024, 3, 15, 10, 0, 0, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)


class TestAuthorizationGate:
    """Test suite for AuthorizationGate."""

    def test_first_attempt_is_claimed(self) -> None:
        gate = AuthorizationGate(clock=SteppingClock())

        assert gate.try_begin() is None
        assert gate.in_progress is True
        assert gate.last_started_at is not None

    def test_refused_while_in_progress(self) -> None:
        """Test a second attempt is refused until the first completes."""
        # Arrange
        clock = SteppingClock()
        gate = AuthorizationGate(clock=clock)
        gate.try_begin()
        clock.advance(7)

        # Act
        refusal = gate.try_begin()

        # Assert
        assert refusal == (
            "Authorization already in progress. "
            "Please wait and try again in a few seconds."
        )

    def test_refused_within_cooldown_after_release(self) -> None:
        clock = SteppingClock()
        gate = AuthorizationGate(clock=clock)
        gate.try_begin()
        gate.release()
        clock.advance(2)

        assert gate.try_begin() == "Please wait a few seconds before trying again."

    def test_claimable_after_cooldown(self) -> None:
        clock = SteppingClock()
        gate = AuthorizationGate(clock=clock)
        gate.try_begin()
        gate.release()
        clock.advance(6)

        assert gate.try_begin() is None

    def test_in_progress_expires(self) -> None:
        """Test an abandoned flow stops blocking after the in-progress window."""
        clock = SteppingClock()
        gate = AuthorizationGate(clock=clock)
        gate.try_begin()
        clock.advance(11)

        assert gate.in_progress is False
        assert gate.try_begin() is None
