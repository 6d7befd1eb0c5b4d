"""Tests for date and amount parsing."""

import pytest
from datetime import date, datetime, timedelta, UTC
from decimal import Decimal

from fintrack.utils.amount_parser import coerce_amount, parse_amount
from fintrack.utils.date_parser import parse_date, parse_timestamp


class TestParseDate:
    """Tests for parse_date."""

    def test_parse_absolute_date(self):
        assert parse_date("2024-01-15") == date(2024, 1, 15)

    def test_parse_long_form(self):
        assert parse_date("January 15, 2024") == date(2024, 1, 15)

    def test_parse_today(self):
        assert parse_date("today") == date.today()

    def test_parse_yesterday(self):
        assert parse_date(" Yesterday ") == date.today() - timedelta(days=1)

    def test_parse_tomorrow(self):
        assert parse_date("tomorrow") == date.today() + timedelta(days=1)

    def test_parse_last_week(self):
        """'last week' is the Monday of the previous week."""
        result = parse_date("last week")
        today = date.today()
        assert result == today - timedelta(days=today.weekday() + 7)
        assert result.weekday() == 0

    def test_parse_last_month(self):
        result = parse_date("last month")
        today = date.today()
        if today.month == 1:
            expected = date(today.year - 1, 12, 1)
        else:
            expected = date(today.year, today.month - 1, 1)
        assert result == expected

    def test_parse_this_year(self):
        assert parse_date("this year") == date(date.today().year, 1, 1)

    def test_parse_invalid_relative(self):
        with pytest.raises(ValueError):
            parse_date("last fortnight")

    def test_parse_garbage(self):
        with pytest.raises(ValueError):
            parse_date("gibberish")


class TestParseTimestamp:
    def test_iso_with_zone(self):
        assert parse_timestamp("2024-03-02T10:15:00Z") == datetime(2024, 3, 2, 10, 15, tzinfo=UTC)

    def test_loose_format(self):
        assert parse_timestamp("March 2, 2024") == datetime(2024, 3, 2)

    @pytest.mark.parametrize("value", [None, "", "   ", "someday", 20240302])
    def test_not_a_timestamp(self, value):
        assert parse_timestamp(value) is None


class TestParseAmount:
    """Tests for parse_amount."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("123.45", Decimal("123.45")),
            ("$123.45", Decimal("123.45")),
            ("₹ 99", Decimal("99")),
            ("-12.50", Decimal("-12.50")),
            ("1,234.56", Decimal("1234.56")),
            ("(45.00)", Decimal("-45.00")),
        ],
    )
    def test_formats(self, text, expected):
        assert parse_amount(text) == expected

    @pytest.mark.parametrize("text", ["", "  ", "abc", "Infinity", "1.2.3"])
    def test_invalid(self, text):
        with pytest.raises(ValueError):
            parse_amount(text)


class TestCoerceAmount:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (12, Decimal("12")),
            (12.5, Decimal("12.5")),
            ("12.50", Decimal("12.50")),
            ("€8", Decimal("8")),
        ],
    )
    def test_numbers(self, value, expected):
        assert coerce_amount(value) == expected

    @pytest.mark.parametrize("value", [None, True, "n/a", float("nan"), [1], {"value": 1}])
    def test_not_numbers(self, value):
        assert coerce_amount(value) is None
