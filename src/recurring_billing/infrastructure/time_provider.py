from __future__ import annotations

from datetime import UTC, date, datetime, time

from recurring_billing.application.ports import TimeProvider


class SystemTimeProvider(TimeProvider):
    """Production time provider using the system clock."""

    def now(self) -> datetime:
        return datetime.now(UTC)


class FixedTimeProvider(TimeProvider):
    """Time provider pinned to one instant, for tests and replays."""

    def __init__(self, fixed_time: datetime) -> None:
        self._validate_utc(fixed_time)
        self._fixed_time = fixed_time

    @classmethod
    def on_date(cls, day: date) -> FixedTimeProvider:
        """Pin the clock to midday UTC on ``day``."""
        return cls(datetime.combine(day, time(12, 0), tzinfo=UTC))

    def now(self) -> datetime:
        return self._fixed_time

    def _validate_utc(self, dt: datetime) -> None:
        if dt.tzinfo is not UTC:
            raise ValueError(f"datetime must have tzinfo=UTC, got tzinfo={dt.tzinfo}")
