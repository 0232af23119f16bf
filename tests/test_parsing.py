"""Tests for numeric parsing and display formatting."""

from __future__ import annotations

import math

import pytest

from parsing import format_number, is_usable, parse_field_number, safe_positive


class TestParseFieldNumber:
    @pytest.mark.parametrize("value", ["1.234,56", "1234,56", "1234.56", 1234.56, " 1 234,56 "])
    def test_both_formats_agree(self, value) -> None:
        assert parse_field_number(value) == pytest.approx(1234.56)

    def test_dot_without_comma_is_decimal(self) -> None:
        assert parse_field_number("1.234") == pytest.approx(1.234)

    def test_integer_passes_through(self) -> None:
        assert parse_field_number(7) == 7.0

    @pytest.mark.parametrize("value", [None, "", "   ", "abc", "1,2,3", "12kg", True, [], {}])
    def test_unreadable_is_nan(self, value) -> None:
        assert math.isnan(parse_field_number(value))

    def test_negative_and_zero_still_parse(self) -> None:
        assert parse_field_number("-2,5") == -2.5
        assert parse_field_number("0") == 0.0

    def test_integer_too_large_for_float(self) -> None:
        assert math.isnan(parse_field_number(10 ** 400))

    @pytest.mark.parametrize("value", ["1_000", "\u0661\u0662\u0663", "\uff11\uff12", "0x10", "1e", "--1"])
    def test_rejects_text_outside_decimal_formats(self, value) -> None:
        assert math.isnan(parse_field_number(value))

    def test_exponent_and_sign_accepted(self) -> None:
        assert parse_field_number("1e3") == 1000.0
        assert parse_field_number("+2.5") == 2.5


class TestSafePositive:
    def test_uses_value_when_positive(self) -> None:
        assert safe_positive("2,5", 6.27) == 2.5

    @pytest.mark.parametrize("value", ["", None, "0", "-1", "x"])
    def test_falls_back(self, value) -> None:
        assert safe_positive(value, 1.37) == 1.37

    def test_is_usable(self) -> None:
        assert is_usable(0.1)
        assert not is_usable(0.0)
        assert not is_usable(math.inf)
        assert not is_usable(math.nan)


class TestFormatNumber:
    def test_thousands_and_decimal(self) -> None:
        assert format_number(1234567.891) == "1.234.567,89"

    def test_minimum_two_decimals(self) -> None:
        assert format_number(1234.5) == "1.234,50"
        assert format_number(3, 6) == "3,00"

    def test_trailing_zeros_trimmed_past_two(self) -> None:
        assert format_number(0.00437, 6) == "0,00437"

    def test_non_finite_shows_zero(self) -> None:
        assert format_number(math.nan) == "0,00"
