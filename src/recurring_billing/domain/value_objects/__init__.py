"""Value objects - Immutable objects defined by their attributes."""

from recurring_billing.domain.value_objects.money import Money, sum_money
from recurring_billing.domain.value_objects.recurrence_rule import (
    BillingInterval,
    Frequency,
    RecurrenceRule,
    Weekday,
    parse_rule,
)

__all__ = [
    "BillingInterval",
    "Frequency",
    "Money",
    "RecurrenceRule",
    "Weekday",
    "parse_rule",
    "sum_money",
]
