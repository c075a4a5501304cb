"""Billing-date query API.

Every function takes rule text, parses it once into a RecurrenceRule
and hands it to the generator selected for the rule's shape. Nothing is
cached between calls.
"""

from __future__ import annotations

from datetime import date, datetime

from recurring_billing.application.dtos import RuleValidation
from recurring_billing.config.logging import get_logger
from recurring_billing.config.settings import get_settings
from recurring_billing.domain.exceptions import InvalidRuleError
from recurring_billing.domain.generators import DateWindow, select_generator
from recurring_billing.domain.value_objects.recurrence_rule import parse_rule

__all__ = [
    "date_matches_recurrence",
    "get_billing_dates_between",
    "get_next_billing_date",
    "get_next_billing_dates",
    "parse_rule",
    "validate_rule",
]

log = get_logger(__name__)


def get_next_billing_dates(
    rule_text: str,
    start: date,
    count: int | None = None,
) -> list[date]:
    """Generate the next billing dates from ``start``.

    Args:
        rule_text: Recurrence rule text.
        start: Date the schedule is seeded from. A datetime is reduced
            to its own calendar date.
        count: Number of dates wanted; defaults to the configured
            ``default_occurrence_count``.

    Returns:
        Ascending dates: exactly ``count`` of them, or fewer when the
        rule's own COUNT is smaller.

    Raises:
        InvalidRuleError: If the rule text cannot be parsed.
        ValueError: If ``count`` is negative.
    """
    if count is None:
        count = get_settings().default_occurrence_count
    if count < 0:
        raise ValueError(f"count must not be negative, got {count}")

    rule = parse_rule(rule_text)
    dates = select_generator(rule).generate(rule, _as_date(start), limit=count)
    log.debug("billing_dates.generated", rule=rule_text, requested=count, returned=len(dates))
    return dates


def get_next_billing_date(rule_text: str, after: date) -> date | None:
    """Return the first billing date strictly after ``after``.

    Rules with a COUNT are replayed from the configured ``count_anchor``
    so the cap has a fixed starting point; None means every capped
    occurrence lies on or before ``after``.

    Raises:
        InvalidRuleError: If the rule text cannot be parsed.
    """
    rule = parse_rule(rule_text)
    reference = _as_date(after)
    generator = select_generator(rule)

    if rule.count is not None:
        capped = generator.generate(rule, get_settings().count_anchor)
        result = next((d for d in capped if d > reference), None)
    else:
        result = generator.next_after(rule, reference)

    log.debug("billing_date.next", rule=rule_text, after=reference.isoformat(), result=_iso(result))
    return result


def date_matches_recurrence(rule_text: str, day: date) -> bool:
    """Check whether ``day`` is a billing day of the rule.

    Only the day's own month (or week, or year) is considered; the
    rule's INTERVAL phase is not replayed from any anchor.

    Raises:
        InvalidRuleError: If the rule text cannot be parsed.
    """
    rule = parse_rule(rule_text)
    return select_generator(rule).matches(rule, _as_date(day))


def get_billing_dates_between(rule_text: str, start: date, end: date) -> list[date]:
    """Return every billing date in the inclusive range ``[start, end]``.

    The walk is anchored at ``start``. The range must be bounded sensibly
    by the caller: a DAILY rule over decades yields every day.

    Raises:
        InvalidRuleError: If the rule text cannot be parsed.
    """
    rule = parse_rule(rule_text)
    window = DateWindow(_as_date(start), _as_date(end))
    if window.end < window.start:
        return []

    dates = select_generator(rule).generate(rule, window.start, window=window)
    log.debug(
        "billing_dates.between",
        rule=rule_text,
        start=window.start.isoformat(),
        end=window.end.isoformat(),
        returned=len(dates),
    )
    return dates


def validate_rule(rule_text: str | None) -> RuleValidation:
    """Pre-flight check that never raises."""
    try:
        parse_rule(rule_text)
    except InvalidRuleError as e:
        log.debug("rule.invalid", rule=rule_text, error=str(e))
        return RuleValidation(valid=False, error=str(e))
    return RuleValidation(valid=True)


def _as_date(value: date) -> date:
    return value.date() if isinstance(value, datetime) else value


def _iso(value: date | None) -> str | None:
    return value.isoformat() if value is not None else None
