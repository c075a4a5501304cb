"""Canonical rule text for common billing schedules."""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from recurring_billing.domain.value_objects.recurrence_rule import (
    BillingInterval,
    Frequency,
    RecurrenceRule,
    Weekday,
)

if TYPE_CHECKING:
    from datetime import date

    from recurring_billing.application.ports import TimeProvider

QUARTER_MONTHS = 3
HALF_YEAR_MONTHS = 6


def interval_to_rule(
    unit: BillingInterval | str,
    interval_count: int = 1,
    anchor: date | None = None,
) -> str:
    """Convert a simple "every N units" interval into rule text.

    Args:
        unit: DAY, WEEK, MONTH or YEAR (enum member or its name).
        interval_count: Number of units between billings.
        anchor: Optional first billing date. Pins the weekday for weekly
            billing, the day of month for monthly billing and the month
            and day for yearly billing.

    Returns:
        Canonical rule text, e.g. ``FREQ=MONTHLY;INTERVAL=3;BYMONTHDAY=31``.

    Raises:
        ValueError: If the unit is unknown or ``interval_count`` < 1.
    """
    billing_interval = unit if isinstance(unit, BillingInterval) else BillingInterval(unit.upper())
    if interval_count < 1:
        raise ValueError(f"interval_count must be at least 1, got {interval_count}")

    rule = RecurrenceRule(frequency=billing_interval.frequency, interval=interval_count)
    if anchor is not None:
        if billing_interval is BillingInterval.WEEK:
            rule = replace(rule, by_day=Weekday.from_date(anchor))
        elif billing_interval is BillingInterval.MONTH:
            rule = replace(rule, by_month_day=anchor.day)
        elif billing_interval is BillingInterval.YEAR:
            rule = replace(rule, by_month=anchor.month, by_month_day=anchor.day)
    return rule.to_string()


class BillingRules:
    """Preset rule text for common billing schedules.

    Omitted days, months and weekdays default to today's date as read
    from the injected clock. Every preset returns text accepted by
    ``parse_rule``.
    """

    def __init__(self, time_provider: TimeProvider) -> None:
        self._time_provider = time_provider

    def monthly(self, day: int | None = None) -> str:
        """Every month on ``day`` (clamped to the month end)."""
        return self._monthly(1, day)

    def yearly(self, month: int | None = None, day: int | None = None) -> str:
        today = self._time_provider.today()
        return RecurrenceRule(
            frequency=Frequency.YEARLY,
            by_month=month or today.month,
            by_month_day=day or today.day,
        ).to_string()

    def weekly(self, weekday: Weekday | int | None = None) -> str:
        """Every week on ``weekday`` (a Weekday, or 0=Monday … 6=Sunday)."""
        if weekday is None:
            code = Weekday.from_date(self._time_provider.today())
        elif isinstance(weekday, Weekday):
            code = weekday
        else:
            code = Weekday.from_index(weekday)
        return RecurrenceRule(frequency=Frequency.WEEKLY, by_day=code).to_string()

    def daily(self, interval: int = 1) -> str:
        return self.custom(Frequency.DAILY, interval)

    def custom(self, frequency: Frequency | str, interval: int = 1) -> str:
        freq = frequency if isinstance(frequency, Frequency) else Frequency(frequency.upper())
        rule = RecurrenceRule(frequency=freq, interval=interval)
        # INTERVAL stays explicit even when 1.
        return f"FREQ={rule.frequency.value};INTERVAL={rule.interval}"

    def quarterly(self, day: int | None = None) -> str:
        return self._monthly(QUARTER_MONTHS, day)

    def semi_annual(self, day: int | None = None) -> str:
        return self._monthly(HALF_YEAR_MONTHS, day)

    def end_of_month(self) -> str:
        """Last calendar day of every month."""
        return RecurrenceRule(frequency=Frequency.MONTHLY, by_month_day=-1).to_string()

    def _monthly(self, interval: int, day: int | None) -> str:
        return RecurrenceRule(
            frequency=Frequency.MONTHLY,
            interval=interval,
            by_month_day=day or self._time_provider.today().day,
        ).to_string()
