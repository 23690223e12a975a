"""
Tests for the bi-weekly pay-period window.

Covers:
- Period shape: 14 consecutive canonical dates
- Month, year and leap-day rollover
- Rejection of non-canonical start dates
- Window validation for caller-supplied date lists
- Period header label
"""

from datetime import date, timedelta

import pytest

from sitecost_engines.pay_period import (
    PAY_PERIOD_DAYS,
    generate_pay_period,
    period_label,
    validate_date_window,
)
from sitecost_kernel.exceptions import InvalidDateError, MalformedDateWindowError


class TestGeneratePayPeriod:

    def test_fourteen_dates_from_start(self):
        dates = generate_pay_period("2024-04-01")
        assert len(dates) == PAY_PERIOD_DAYS == 14
        assert dates[0] == "2024-04-01"
        assert dates[-1] == "2024-04-14"

    def test_consecutive_days(self):
        dates = generate_pay_period("2024-04-01")
        parsed = [date.fromisoformat(d) for d in dates]
        for earlier, later in zip(parsed, parsed[1:]):
            assert later - earlier == timedelta(days=1)

    def test_month_rollover(self):
        dates = generate_pay_period("2024-04-25")
        assert dates[5] == "2024-04-30"
        assert dates[6] == "2024-05-01"
        assert dates[-1] == "2024-05-08"

    def test_year_rollover(self):
        dates = generate_pay_period("2024-12-25")
        assert "2024-12-31" in dates
        assert "2025-01-01" in dates
        assert dates[-1] == "2025-01-07"

    def test_leap_day_included(self):
        dates = generate_pay_period("2024-02-20")
        assert "2024-02-29" in dates
        assert dates[10] == "2024-03-01"

    def test_accepts_date_object(self):
        assert generate_pay_period(date(2024, 4, 1)) == generate_pay_period("2024-04-01")

    def test_returns_tuple_of_strings(self):
        dates = generate_pay_period("2024-04-01")
        assert isinstance(dates, tuple)
        assert all(isinstance(d, str) for d in dates)

    def test_deterministic(self):
        assert generate_pay_period("2024-07-01") == generate_pay_period("2024-07-01")

    @pytest.mark.parametrize("bad", [
        "2024-4-1",
        "20240401",
        "2024-04-01T00:00:00",
        "2024-02-30",
        "",
        "not a date",
    ])
    def test_rejects_non_canonical_start(self, bad):
        with pytest.raises(InvalidDateError) as exc_info:
            generate_pay_period(bad)
        assert exc_info.value.value == bad
        assert exc_info.value.code == "INVALID_DATE"


class TestValidateDateWindow:

    def test_returns_membership_set(self):
        window = generate_pay_period("2024-04-01")
        result = validate_date_window(window)
        assert result == frozenset(window)
        assert "2024-04-07" in result

    def test_empty_window_is_valid(self):
        assert validate_date_window(()) == frozenset()

    def test_malformed_values_listed(self):
        with pytest.raises(MalformedDateWindowError) as exc_info:
            validate_date_window(["2024-04-01", "2024/04/02", "04-03-2024"])
        assert exc_info.value.invalid_values == ("2024/04/02", "04-03-2024")
        assert exc_info.value.code == "MALFORMED_DATE_WINDOW"

    def test_non_string_value_is_malformed(self):
        with pytest.raises(MalformedDateWindowError):
            validate_date_window(["2024-04-01", date(2024, 4, 2)])

    def test_malformed_window_logged(self, captured_logs):
        with pytest.raises(MalformedDateWindowError):
            validate_date_window(["bad"])
        logs = captured_logs()
        assert any(r["message"] == "date_window_malformed" for r in logs)


class TestPeriodLabel:

    def test_same_month(self):
        assert period_label("2024-04-01") == "Apr 01 - Apr 14, 2024"

    def test_spans_months(self):
        assert period_label("2024-04-25") == "Apr 25 - May 08, 2024"

    def test_spans_years_uses_end_year(self):
        assert period_label("2024-12-25") == "Dec 25 - Jan 07, 2025"
