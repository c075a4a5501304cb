"""Monthly generator that clamps the billing day to the month end.

A rule such as ``FREQ=MONTHLY;BYMONTHDAY=31`` bills on the 31st, or on
the month's last day when the 31st does not exist (April 30, Feb 28).
Calendar-expansion libraries skip such months instead, so the walk is
computed directly here.
"""

from __future__ import annotations

import calendar
from datetime import MAXYEAR, date
from typing import TYPE_CHECKING

from recurring_billing.domain.generators.base import OccurrenceGenerator

if TYPE_CHECKING:
    from collections.abc import Iterator

    from recurring_billing.domain.value_objects.recurrence_rule import RecurrenceRule


def clamp_day(year: int, month: int, by_month_day: int) -> date:
    """Resolve a BYMONTHDAY value to a concrete date in ``year``/``month``.

    Positive values past the month's last day clamp down to it, and ``0``
    is the last day. Negative values count back from the month end
    (``-1`` is the last day) and never resolve before the 1st.
    """
    last_day = calendar.monthrange(year, month)[1]
    if by_month_day == 0:
        day = last_day
    elif by_month_day < 0:
        day = max(1, last_day + by_month_day + 1)
    else:
        day = min(by_month_day, last_day)
    return date(year, month, day)


def add_months(year: int, month: int, months: int) -> tuple[int, int]:
    """Advance a ``(year, month)`` cursor, rolling the year over as needed."""
    index = year * 12 + (month - 1) + months
    return index // 12, index % 12 + 1


class ClampedMonthlyGenerator(OccurrenceGenerator):
    """Generator for MONTHLY rules that carry BYMONTHDAY.

    The cursor is seeded from the anchor's month, so the first date is
    that month's target day even when it falls before the anchor day.
    """

    def occurrences(self, rule: RecurrenceRule, anchor: date) -> Iterator[date]:
        by_month_day = _require_month_day(rule)
        year, month = anchor.year, anchor.month
        while year <= MAXYEAR:
            yield clamp_day(year, month, by_month_day)
            year, month = add_months(year, month, rule.interval)

    def next_after(self, rule: RecurrenceRule, reference: date) -> date | None:
        """Step one interval past the reference month, then keep stepping.

        The month containing ``reference`` is never a candidate. Stepping
        continues until the clamped date is strictly after ``reference``.
        """
        by_month_day = _require_month_day(rule)
        year, month = add_months(reference.year, reference.month, rule.interval)
        while year <= MAXYEAR:
            candidate = clamp_day(year, month, by_month_day)
            if candidate > reference:
                return candidate
            year, month = add_months(year, month, rule.interval)
        return None

    def matches(self, rule: RecurrenceRule, day: date) -> bool:
        # Interval phase is not checked: any month's clamped day matches.
        return clamp_day(day.year, day.month, _require_month_day(rule)) == day


def _require_month_day(rule: RecurrenceRule) -> int:
    if rule.by_month_day is None:
        raise ValueError(f"Clamped monthly generation needs BYMONTHDAY: {rule}")
    return rule.by_month_day
