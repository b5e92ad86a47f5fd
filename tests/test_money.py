"""Tests for money helpers"""
from decimal import Decimal

import pytest

from octamart.services.money import (
    divide,
    format_rupiah,
    multiply,
    percent,
    round_money,
    to_decimal,
    to_float,
    to_json_number,
)


class TestToDecimal:
    def test_float_goes_through_str(self):
        assert to_decimal(0.1) == Decimal("0.1")

    @pytest.mark.parametrize("value", [None, "abc", [1]])
    def test_invalid_is_zero(self, value):
        assert to_decimal(value) == Decimal("0")

    def test_decimal_passthrough(self):
        value = Decimal("12.50")
        assert to_decimal(value) is value


class TestRounding:
    def test_half_up(self):
        assert round_money("2.345") == Decimal("2.35")
        assert round_money("2.5", to_int=True) == Decimal("3")

    def test_multiply(self):
        assert multiply("250000", 3) == Decimal("750000")
        assert to_float(multiply(650000, Decimal("0.11"))) == 71500.0

    def test_percent(self):
        assert percent(250000, 11) == Decimal("27500")

    def test_divide_by_zero(self):
        assert divide(100, 0) == Decimal("0")


class TestJsonNumbers:
    def test_whole_amount_is_int(self):
        value = to_json_number(Decimal("741500.00"))
        assert value == 741500
        assert isinstance(value, int)

    def test_fraction_is_float(self):
        assert to_json_number("1234.567") == 1234.57


class TestFormatRupiah:
    @pytest.mark.parametrize("value,expected", [
        (0, "Rp 0"),
        (1250000, "Rp 1.250.000"),
        ("999.5", "Rp 1.000"),
        (-15000, "-Rp 15.000"),
    ])
    def test_format(self, value, expected):
        assert format_rupiah(value) == expected
