"""Yearly generator for February 29 billing.

Unlike the monthly clamp, non-leap years are skipped entirely: a
``FREQ=YEARLY;BYMONTH=2;BYMONTHDAY=29`` rule never bills on Feb 28.
"""

from __future__ import annotations

from datetime import MAXYEAR, date
from typing import TYPE_CHECKING

from recurring_billing.domain.generators.base import OccurrenceGenerator

if TYPE_CHECKING:
    from collections.abc import Iterator

    from recurring_billing.domain.value_objects.recurrence_rule import RecurrenceRule


def is_leap_year(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


class LeapDayYearlyGenerator(OccurrenceGenerator):
    """Emits Feb 29 for leap years, walking years by the rule's interval.

    The walk is phased from the first leap year on or after the anchor
    year, so an interval that would otherwise only land on common years
    (an even interval from an odd year) still reaches leap days.
    """

    def occurrences(self, rule: RecurrenceRule, anchor: date) -> Iterator[date]:
        year = anchor.year
        while year <= MAXYEAR and not is_leap_year(year):
            year += 1
        while year <= MAXYEAR:
            if is_leap_year(year):
                yield date(year, 2, 29)
            year += rule.interval

    def next_after(self, rule: RecurrenceRule, reference: date) -> date | None:
        seed = date(reference.year, 1, 1)
        return next((d for d in self.occurrences(rule, seed) if d > reference), None)

    def matches(self, rule: RecurrenceRule, day: date) -> bool:
        return day.month == 2 and day.day == 29
