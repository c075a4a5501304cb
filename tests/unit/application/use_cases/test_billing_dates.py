"""Tests for the billing-date query API.

Tests cover:
- get_next_billing_dates: month-end clamping, leap days, intervals, defaults
- get_next_billing_date: next occurrence, COUNT exhaustion returning None
- date_matches_recurrence, including the unchecked interval phase
- get_billing_dates_between: inclusive windows, empty windows
- validate_rule: never raises
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from recurring_billing.application.dtos import RuleValidation
from recurring_billing.application.use_cases.billing_dates import (
    date_matches_recurrence,
    get_billing_dates_between,
    get_next_billing_date,
    get_next_billing_dates,
    validate_rule,
)
from recurring_billing.domain.exceptions import InvalidRuleError

# =============================================================================
# get_next_billing_dates
# =============================================================================


class TestGetNextBillingDates:
    def test_monthly_on_the_first(self) -> None:
        dates = get_next_billing_dates("FREQ=MONTHLY;BYMONTHDAY=1", date(2025, 1, 1), 6)

        assert dates == [date(2025, m, 1) for m in range(1, 7)]

    def test_day_31_clamps_to_month_end(self) -> None:
        dates = get_next_billing_dates("FREQ=MONTHLY;BYMONTHDAY=31", date(2025, 1, 31), 4)

        assert dates == [date(2025, 1, 31), date(2025, 2, 28), date(2025, 3, 31), date(2025, 4, 30)]

    def test_end_of_month(self) -> None:
        dates = get_next_billing_dates("FREQ=MONTHLY;BYMONTHDAY=-1", date(2025, 1, 31), 12)

        for d in dates:
            assert (d + timedelta(days=1)).day == 1
        assert [d.month for d in dates] == list(range(1, 13))

    def test_leap_day_yearly(self) -> None:
        dates = get_next_billing_dates("FREQ=YEARLY;BYMONTH=2;BYMONTHDAY=29", date(2024, 2, 29), 3)

        assert dates == [date(2024, 2, 29), date(2028, 2, 29), date(2032, 2, 29)]

    @pytest.mark.parametrize("by_month_day", [0, 45])
    def test_out_of_range_month_day_bills_on_month_end(self, by_month_day: int) -> None:
        dates = get_next_billing_dates(
            f"FREQ=MONTHLY;BYMONTHDAY={by_month_day}", date(2024, 1, 1), 3
        )

        assert dates == [date(2024, 1, 31), date(2024, 2, 29), date(2024, 3, 31)]

    @pytest.mark.parametrize("interval", [2, 4])
    def test_leap_day_interval_from_common_year(self, interval: int) -> None:
        rule_text = f"FREQ=YEARLY;INTERVAL={interval};BYMONTH=2;BYMONTHDAY=29"

        dates = get_next_billing_dates(rule_text, date(2025, 1, 1), 3)

        assert dates == [date(2028, 2, 29), date(2032, 2, 29), date(2036, 2, 29)]

    def test_bi_monthly(self) -> None:
        dates = get_next_billing_dates("FREQ=MONTHLY;BYMONTHDAY=15;INTERVAL=2", date(2025, 1, 15), 4)

        assert dates == [date(2025, 1, 15), date(2025, 3, 15), date(2025, 5, 15), date(2025, 7, 15)]

    def test_quarterly(self) -> None:
        dates = get_next_billing_dates("FREQ=MONTHLY;INTERVAL=3;BYMONTHDAY=1", date(2025, 1, 1), 4)

        assert dates == [date(2025, 1, 1), date(2025, 4, 1), date(2025, 7, 1), date(2025, 10, 1)]

    def test_weekly_across_dst_from_aware_datetime(self) -> None:
        eastern = timezone(timedelta(hours=-5))
        start = datetime(2025, 3, 2, 10, 0, tzinfo=eastern)

        dates = get_next_billing_dates("FREQ=WEEKLY;BYDAY=SU", start, 4)

        assert len(dates) == 4
        assert {d.weekday() for d in dates} == {6}
        assert dates[0] == date(2025, 3, 2)

    def test_defaults_to_configured_count(self) -> None:
        assert len(get_next_billing_dates("FREQ=MONTHLY;BYMONTHDAY=1", date(2025, 1, 1))) == 12

    def test_configured_count_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RECURRING_BILLING_DEFAULT_OCCURRENCE_COUNT", "3")

        assert len(get_next_billing_dates("FREQ=DAILY", date(2025, 1, 1))) == 3

    def test_rule_count_caps_result(self) -> None:
        dates = get_next_billing_dates("FREQ=MONTHLY;BYMONTHDAY=1;COUNT=2", date(2025, 1, 1), 10)

        assert dates == [date(2025, 1, 1), date(2025, 2, 1)]

    def test_rejects_negative_count(self) -> None:
        with pytest.raises(ValueError):
            get_next_billing_dates("FREQ=DAILY", date(2025, 1, 1), -1)

    def test_invalid_rule_propagates(self) -> None:
        with pytest.raises(InvalidRuleError):
            get_next_billing_dates("FREQ=SOMETIMES", date(2025, 1, 1), 3)

    @pytest.mark.parametrize(
        "rule_text",
        [
            "FREQ=DAILY",
            "FREQ=DAILY;INTERVAL=7",
            "FREQ=WEEKLY;BYDAY=TH",
            "FREQ=MONTHLY",
            "FREQ=MONTHLY;BYMONTHDAY=31",
            "FREQ=MONTHLY;BYMONTHDAY=-3;INTERVAL=5",
            "FREQ=YEARLY",
            "FREQ=YEARLY;BYMONTH=2;BYMONTHDAY=29",
            "FREQ=YEARLY;INTERVAL=2;BYMONTH=2;BYMONTHDAY=29",
            "FREQ=MONTHLY;BYMONTHDAY=0",
        ],
    )
    @pytest.mark.parametrize("count", [1, 7, 24])
    def test_exact_count_strictly_ascending(self, rule_text: str, count: int) -> None:
        dates = get_next_billing_dates(rule_text, date(2024, 1, 31), count)

        assert len(dates) == count
        assert all(a < b for a, b in zip(dates, dates[1:]))


# =============================================================================
# get_next_billing_date
# =============================================================================


class TestGetNextBillingDate:
    def test_next_monthly(self) -> None:
        assert get_next_billing_date("FREQ=MONTHLY;BYMONTHDAY=1", date(2025, 1, 15)) == date(
            2025, 2, 1
        )

    def test_none_when_count_exhausted(self) -> None:
        assert get_next_billing_date("FREQ=MONTHLY;BYMONTHDAY=1;COUNT=1", date(2025, 2, 1)) is None

    def test_count_is_replayed_from_anchor(self) -> None:
        # COUNT=3 from 2024-01-01 covers Jan, Feb and Mar 2024.
        rule_text = "FREQ=MONTHLY;BYMONTHDAY=31;COUNT=3"

        assert get_next_billing_date(rule_text, date(2024, 1, 31)) == date(2024, 2, 29)
        assert get_next_billing_date(rule_text, date(2024, 3, 31)) is None

    def test_count_anchor_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RECURRING_BILLING_COUNT_ANCHOR", "2025-01-01")

        assert get_next_billing_date("FREQ=MONTHLY;BYMONTHDAY=1;COUNT=2", date(2025, 1, 15)) == date(
            2025, 2, 1
        )

    def test_next_weekly_is_strictly_after(self) -> None:
        assert get_next_billing_date("FREQ=WEEKLY;BYDAY=MO", date(2025, 3, 3)) == date(2025, 3, 10)

    def test_next_leap_day(self) -> None:
        assert get_next_billing_date(
            "FREQ=YEARLY;BYMONTH=2;BYMONTHDAY=29", date(2025, 6, 1)
        ) == date(2028, 2, 29)

    def test_next_leap_day_with_interval(self) -> None:
        rule_text = "FREQ=YEARLY;INTERVAL=4;BYMONTH=2;BYMONTHDAY=29"

        assert get_next_billing_date(rule_text, date(2025, 3, 1)) == date(2028, 2, 29)

    def test_accepts_datetime(self) -> None:
        after = datetime(2025, 1, 15, 23, 30, tzinfo=timezone.utc)

        assert get_next_billing_date("FREQ=MONTHLY;BYMONTHDAY=1", after) == date(2025, 2, 1)


# =============================================================================
# date_matches_recurrence
# =============================================================================


class TestDateMatchesRecurrence:
    def test_monthly_day(self) -> None:
        assert date_matches_recurrence("FREQ=MONTHLY;BYMONTHDAY=1", date(2025, 3, 1))
        assert not date_matches_recurrence("FREQ=MONTHLY;BYMONTHDAY=1", date(2025, 3, 15))

    def test_clamped_day(self) -> None:
        assert date_matches_recurrence("FREQ=MONTHLY;BYMONTHDAY=31", date(2025, 6, 30))

    def test_last_day(self) -> None:
        assert date_matches_recurrence("FREQ=MONTHLY;BYMONTHDAY=-1", date(2024, 2, 29))
        assert not date_matches_recurrence("FREQ=MONTHLY;BYMONTHDAY=-1", date(2024, 2, 28))

    def test_weekly(self) -> None:
        assert date_matches_recurrence("FREQ=WEEKLY;BYDAY=SU", date(2025, 3, 9))
        assert not date_matches_recurrence("FREQ=WEEKLY;BYDAY=SU", date(2025, 3, 10))

    def test_interval_phase_is_not_checked(self) -> None:
        # A January-anchored every-other-month rule never emits February,
        # yet membership only looks at the day within the month.
        rule_text = "FREQ=MONTHLY;BYMONTHDAY=15;INTERVAL=2"
        emitted = get_next_billing_dates(rule_text, date(2025, 1, 15), 6)

        assert date(2025, 2, 15) not in emitted
        assert date_matches_recurrence(rule_text, date(2025, 2, 15))


# =============================================================================
# get_billing_dates_between
# =============================================================================


class TestGetBillingDatesBetween:
    def test_half_year_of_firsts(self) -> None:
        dates = get_billing_dates_between(
            "FREQ=MONTHLY;BYMONTHDAY=1", date(2025, 1, 1), date(2025, 6, 30)
        )

        assert dates == [date(2025, m, 1) for m in range(1, 7)]

    def test_empty_window(self) -> None:
        assert (
            get_billing_dates_between("FREQ=MONTHLY;BYMONTHDAY=1", date(2025, 3, 15), date(2025, 3, 20))
            == []
        )

    def test_reversed_window_is_empty(self) -> None:
        assert get_billing_dates_between("FREQ=DAILY", date(2025, 3, 20), date(2025, 3, 15)) == []

    def test_bounds_are_inclusive(self) -> None:
        dates = get_billing_dates_between(
            "FREQ=MONTHLY;BYMONTHDAY=-1", date(2025, 1, 31), date(2025, 3, 31)
        )

        assert dates == [date(2025, 1, 31), date(2025, 2, 28), date(2025, 3, 31)]

    def test_skips_anchor_month_day_before_start(self) -> None:
        dates = get_billing_dates_between(
            "FREQ=MONTHLY;BYMONTHDAY=10", date(2025, 1, 15), date(2025, 3, 31)
        )

        assert dates == [date(2025, 2, 10), date(2025, 3, 10)]

    def test_weekly_window(self) -> None:
        dates = get_billing_dates_between("FREQ=WEEKLY;BYDAY=FR", date(2025, 3, 1), date(2025, 3, 31))

        assert dates == [date(2025, 3, 7), date(2025, 3, 14), date(2025, 3, 21), date(2025, 3, 28)]

    def test_leap_day_window(self) -> None:
        dates = get_billing_dates_between(
            "FREQ=YEARLY;BYMONTH=2;BYMONTHDAY=29", date(2025, 1, 1), date(2033, 1, 1)
        )

        assert dates == [date(2028, 2, 29), date(2032, 2, 29)]


# =============================================================================
# validate_rule
# =============================================================================


class TestValidateRule:
    @pytest.mark.parametrize(
        "rule_text",
        [
            "FREQ=MONTHLY;BYMONTHDAY=1",
            "FREQ=WEEKLY;BYDAY=MO",
            "FREQ=YEARLY;BYMONTH=2;BYMONTHDAY=29",
            "FREQ=DAILY;INTERVAL=2;COUNT=10",
            "FREQ=MONTHLY;BYMONTHDAY=0",
            "FREQ=MONTHLY;BYMONTHDAY=45",
        ],
    )
    def test_valid_rules(self, rule_text: str) -> None:
        assert validate_rule(rule_text) == RuleValidation(valid=True)

    @pytest.mark.parametrize("rule_text", ["", None, "INVALID_RRULE_STRING", "FREQ=FORTNIGHTLY"])
    def test_invalid_rules_report_error(self, rule_text: str | None) -> None:
        result = validate_rule(rule_text)

        assert result.valid is False
        assert result.error is not None
        assert "Invalid RRULE" in result.error
