"""Generic RFC 5545 style expansion backed by ``dateutil.rrule``.

Handles every rule shape without a dedicated generator: DAILY, WEEKLY,
MONTHLY without BYMONTHDAY, and YEARLY other than Feb 29. A literal day
missing from a month is skipped there, as the standard prescribes.
"""

from __future__ import annotations

from datetime import UTC, date, datetime, time
from typing import TYPE_CHECKING, ClassVar

from dateutil.rrule import DAILY, FR, MO, MONTHLY, SA, SU, TH, TU, WE, WEEKLY, YEARLY, rrule

from recurring_billing.domain.generators.base import OccurrenceGenerator
from recurring_billing.domain.value_objects.recurrence_rule import Frequency, Weekday

if TYPE_CHECKING:
    from collections.abc import Iterator

    from dateutil.rrule import weekday

    from recurring_billing.domain.value_objects.recurrence_rule import RecurrenceRule

# Weekly anchors sit at midday UTC so no DST shift can change the calendar day.
WEEKLY_ANCHOR_TIME = time(12, 0, tzinfo=UTC)
MAX_MONTH_DAY = 31


class CalendarExpansionGenerator(OccurrenceGenerator):
    """Delegates expansion to dateutil, one rrule per call."""

    FREQUENCY_TO_RRULE: ClassVar[dict[Frequency, int]] = {
        Frequency.DAILY: DAILY,
        Frequency.WEEKLY: WEEKLY,
        Frequency.MONTHLY: MONTHLY,
        Frequency.YEARLY: YEARLY,
    }

    WEEKDAY_TO_RRULE: ClassVar[dict[Weekday, weekday]] = {
        Weekday.MO: MO,
        Weekday.TU: TU,
        Weekday.WE: WE,
        Weekday.TH: TH,
        Weekday.FR: FR,
        Weekday.SA: SA,
        Weekday.SU: SU,
    }

    def occurrences(self, rule: RecurrenceRule, anchor: date) -> Iterator[date]:
        for occurrence in self._build(rule, anchor):
            yield occurrence.date()

    def next_after(self, rule: RecurrenceRule, reference: date) -> date | None:
        start = self._normalize(rule, reference)
        occurrence = self._build(rule, reference).after(start, inc=False)
        return occurrence.date() if occurrence is not None else None

    def matches(self, rule: RecurrenceRule, day: date) -> bool:
        # Anchored on the day itself: it matches when it is the first occurrence.
        return next(self.occurrences(rule, day), None) == day

    def _build(self, rule: RecurrenceRule, anchor: date) -> rrule:
        return rrule(
            self.FREQUENCY_TO_RRULE[rule.frequency],
            dtstart=self._normalize(rule, anchor),
            interval=rule.interval,
            bymonthday=_rrule_month_day(rule.by_month_day),
            bymonth=rule.by_month,
            byweekday=self.WEEKDAY_TO_RRULE[rule.by_day] if rule.by_day is not None else None,
        )

    @staticmethod
    def _normalize(rule: RecurrenceRule, day: date) -> datetime:
        if rule.frequency is Frequency.WEEKLY:
            return datetime.combine(day, WEEKLY_ANCHOR_TIME)
        return datetime.combine(day, time())


def _rrule_month_day(by_month_day: int | None) -> int | None:
    # dateutil ignores 0 and never matches days past 31.
    if by_month_day is None:
        return None
    if by_month_day == 0:
        return -1
    return max(-MAX_MONTH_DAY, min(by_month_day, MAX_MONTH_DAY))
