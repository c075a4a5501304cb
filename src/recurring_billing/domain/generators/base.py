from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from itertools import islice
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator
    from datetime import date

    from recurring_billing.domain.value_objects.recurrence_rule import RecurrenceRule


@dataclass(frozen=True, slots=True)
class DateWindow:
    """Inclusive ``[start, end]`` date range."""

    start: date
    end: date

    def __contains__(self, day: object) -> bool:
        return self.start <= day <= self.end  # type: ignore[operator]


class OccurrenceGenerator(ABC):
    """Strategy that turns a RecurrenceRule into occurrence dates.

    Contract:
    - occurrences() yields dates in strictly ascending order, lazily,
      starting from the anchor; it may be unbounded
    - generate() applies the rule's COUNT cap counted from the anchor,
      then the optional window and limit
    - implementations hold no state; one instance serves every rule
    """

    @abstractmethod
    def occurrences(self, rule: RecurrenceRule, anchor: date) -> Iterator[date]:
        """Yield occurrences of ``rule`` starting from ``anchor``."""

    @abstractmethod
    def next_after(self, rule: RecurrenceRule, reference: date) -> date | None:
        """Return the first occurrence strictly after ``reference``, ignoring COUNT."""

    @abstractmethod
    def matches(self, rule: RecurrenceRule, day: date) -> bool:
        """Return True if ``day`` is an occurrence day of ``rule``."""

    def generate(
        self,
        rule: RecurrenceRule,
        anchor: date,
        *,
        limit: int | None = None,
        window: DateWindow | None = None,
    ) -> list[date]:
        """Collect occurrences from ``anchor`` bounded by count and/or window.

        Args:
            rule: The parsed rule.
            anchor: Date the walk is seeded from.
            limit: Maximum number of dates to return.
            window: Inclusive range; earlier dates are skipped and the walk
                stops at the first date past its end.

        Returns:
            Ascending list of occurrence dates.
        """
        if limit is not None and limit <= 0:
            return []

        candidates: Iterator[date] = self.occurrences(rule, anchor)
        if rule.count is not None:
            candidates = islice(candidates, rule.count)

        dates: list[date] = []
        for candidate in candidates:
            if window is not None:
                if candidate > window.end:
                    break
                if candidate < window.start:
                    continue
            dates.append(candidate)
            if limit is not None and len(dates) >= limit:
                break
        return dates
