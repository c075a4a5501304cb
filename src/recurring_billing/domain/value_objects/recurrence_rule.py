"""Recurrence rule value object and its text parser.

Rule text is a semicolon-separated list of KEY=VALUE pairs drawn from
FREQ, INTERVAL, BYMONTHDAY, BYMONTH, BYDAY and COUNT, e.g.
``FREQ=MONTHLY;INTERVAL=3;BYMONTHDAY=-1``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from recurring_billing.domain.exceptions import InvalidRuleError

if TYPE_CHECKING:
    from datetime import date

RRULE_PREFIX = "RRULE:"


class Frequency(Enum):
    """Recurrence frequency; the tag generator dispatch keys on."""

    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


class Weekday(Enum):
    """Two-letter weekday codes, ordered like ``date.weekday()``."""

    MO = "MO"
    TU = "TU"
    WE = "WE"
    TH = "TH"
    FR = "FR"
    SA = "SA"
    SU = "SU"

    @classmethod
    def from_index(cls, index: int) -> Weekday:
        """Map a Python weekday index (0=Monday) to its code."""
        if not 0 <= index <= 6:
            raise ValueError(f"Weekday index must be between 0 and 6, got {index}")
        return list(cls)[index]

    @classmethod
    def from_date(cls, day: date) -> Weekday:
        return cls.from_index(day.weekday())

    @property
    def index(self) -> int:
        return list(Weekday).index(self)


class BillingInterval(Enum):
    """Coarse billing interval units accepted by interval conversion."""

    DAY = "DAY"
    WEEK = "WEEK"
    MONTH = "MONTH"
    YEAR = "YEAR"

    @property
    def frequency(self) -> Frequency:
        return _INTERVAL_FREQUENCIES[self]


_INTERVAL_FREQUENCIES = {
    BillingInterval.DAY: Frequency.DAILY,
    BillingInterval.WEEK: Frequency.WEEKLY,
    BillingInterval.MONTH: Frequency.MONTHLY,
    BillingInterval.YEAR: Frequency.YEARLY,
}


@dataclass(frozen=True, slots=True)
class RecurrenceRule:
    """Parsed, immutable recurrence rule.

    Fields absent from the source text are None; only ``interval``
    has a default. Construction validates every field and raises
    InvalidRuleError on out-of-range values, so an instance is
    always usable by the generators.

    Use ``parse_rule()`` (or ``RecurrenceRule.from_string()``) to
    build a rule from text.
    """

    frequency: Frequency
    interval: int = 1
    by_month_day: int | None = None
    by_month: int | None = None
    by_day: Weekday | None = None
    count: int | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.frequency, Frequency):
            raise InvalidRuleError(f"Unsupported frequency: {self.frequency!r}")

        if self.interval < 1:
            raise InvalidRuleError(f"INTERVAL must be a positive integer, got {self.interval}")

        if self.by_month is not None and not 1 <= self.by_month <= 12:
            raise InvalidRuleError(f"BYMONTH must be between 1 and 12, got {self.by_month}")

        if self.count is not None and self.count < 1:
            raise InvalidRuleError(f"COUNT must be a positive integer, got {self.count}")

    @classmethod
    def from_string(cls, text: str | None) -> RecurrenceRule:
        """Parse rule text into a RecurrenceRule.

        Args:
            text: Rule text such as ``FREQ=MONTHLY;BYMONTHDAY=31``. Keys and
                values are case-insensitive, an ``RRULE:`` prefix is allowed,
                unknown keys are ignored and key order is irrelevant.

        Returns:
            The parsed rule.

        Raises:
            InvalidRuleError: If the text is empty or missing, lacks a
                recognizable FREQ, or carries a malformed known value.
        """
        if text is None or not isinstance(text, str) or not text.strip():
            raise InvalidRuleError(f"Invalid RRULE: {text!r}")

        body = text.strip()
        if body.upper().startswith(RRULE_PREFIX):
            body = body[len(RRULE_PREFIX) :]

        fields: dict[str, str] = {}
        for segment in body.split(";"):
            segment = segment.strip()
            if not segment:
                continue
            key, sep, value = segment.partition("=")
            if not sep:
                raise InvalidRuleError(f"Invalid RRULE: {text!r} (segment {segment!r} has no '=')")
            fields[key.strip().upper()] = value.strip().upper()

        freq = fields.get("FREQ")
        if freq is None:
            raise InvalidRuleError(f"Invalid RRULE: {text!r} (missing FREQ)")
        try:
            frequency = Frequency(freq)
        except ValueError as e:
            raise InvalidRuleError(f"Invalid RRULE: {text!r} (unsupported FREQ {freq!r})") from e

        interval = _parse_int(fields, "INTERVAL", text)
        return cls(
            frequency=frequency,
            interval=1 if interval is None else interval,
            by_month_day=_parse_int(fields, "BYMONTHDAY", text),
            by_month=_parse_int(fields, "BYMONTH", text),
            by_day=_parse_weekday(fields, text),
            count=_parse_int(fields, "COUNT", text),
        )

    def to_string(self) -> str:
        """Render canonical rule text that parses back to an equal rule."""
        parts = [f"FREQ={self.frequency.value}"]
        if self.interval > 1:
            parts.append(f"INTERVAL={self.interval}")
        if self.by_month is not None:
            parts.append(f"BYMONTH={self.by_month}")
        if self.by_month_day is not None:
            parts.append(f"BYMONTHDAY={self.by_month_day}")
        if self.by_day is not None:
            parts.append(f"BYDAY={self.by_day.value}")
        if self.count is not None:
            parts.append(f"COUNT={self.count}")
        return ";".join(parts)

    def __str__(self) -> str:
        return self.to_string()


def parse_rule(text: str | None) -> RecurrenceRule:
    """Parse rule text; see ``RecurrenceRule.from_string``."""
    return RecurrenceRule.from_string(text)


def _parse_int(fields: dict[str, str], key: str, text: str) -> int | None:
    raw = fields.get(key)
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError as e:
        raise InvalidRuleError(f"Invalid RRULE: {text!r} ({key} must be an integer, got {raw!r})") from e


def _parse_weekday(fields: dict[str, str], text: str) -> Weekday | None:
    raw = fields.get("BYDAY")
    if raw is None:
        return None
    try:
        return Weekday(raw)
    except ValueError as e:
        raise InvalidRuleError(f"Invalid RRULE: {text!r} (unknown BYDAY code {raw!r})") from e
