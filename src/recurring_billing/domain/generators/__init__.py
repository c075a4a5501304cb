"""Occurrence generators - Strategies that expand a rule into billing dates."""

from recurring_billing.domain.generators.base import DateWindow, OccurrenceGenerator
from recurring_billing.domain.generators.calendar_expansion import CalendarExpansionGenerator
from recurring_billing.domain.generators.clamped_monthly import ClampedMonthlyGenerator, clamp_day
from recurring_billing.domain.generators.dispatch import select_generator
from recurring_billing.domain.generators.leap_day_yearly import LeapDayYearlyGenerator, is_leap_year

__all__ = [
    "CalendarExpansionGenerator",
    "ClampedMonthlyGenerator",
    "DateWindow",
    "LeapDayYearlyGenerator",
    "OccurrenceGenerator",
    "clamp_day",
    "is_leap_year",
    "select_generator",
]
