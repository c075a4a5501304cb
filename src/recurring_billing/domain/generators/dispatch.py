from __future__ import annotations

from typing import TYPE_CHECKING

from recurring_billing.domain.generators.calendar_expansion import CalendarExpansionGenerator
from recurring_billing.domain.generators.clamped_monthly import ClampedMonthlyGenerator
from recurring_billing.domain.generators.leap_day_yearly import LeapDayYearlyGenerator
from recurring_billing.domain.value_objects.recurrence_rule import Frequency

if TYPE_CHECKING:
    from recurring_billing.domain.generators.base import OccurrenceGenerator
    from recurring_billing.domain.value_objects.recurrence_rule import RecurrenceRule

CLAMPED_MONTHLY = ClampedMonthlyGenerator()
LEAP_DAY_YEARLY = LeapDayYearlyGenerator()
CALENDAR_EXPANSION = CalendarExpansionGenerator()


def select_generator(rule: RecurrenceRule) -> OccurrenceGenerator:
    """Pick the generator for a rule's shape.

    Order matters: MONTHLY with BYMONTHDAY always takes the clamped path,
    whatever else the rule carries.
    """
    if rule.frequency is Frequency.MONTHLY and rule.by_month_day is not None:
        return CLAMPED_MONTHLY
    if rule.frequency is Frequency.YEARLY and rule.by_month == 2 and rule.by_month_day == 29:
        return LEAP_DAY_YEARLY
    return CALENDAR_EXPANSION
