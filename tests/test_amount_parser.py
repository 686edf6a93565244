"""Tests for amount parsing and formatting."""

from decimal import Decimal

import pytest

from piggybank.domain.errors import BadRequestError
from piggybank.utils.amount_parser import format_amount, parse_amount, to_amount


@pytest.mark.parametrize(
    "text,expected",
    [
        ("123.45", Decimal("123.45")),
        ("$123.45", Decimal("123.45")),
        ("-123.45", Decimal("-123.45")),
        ("-$123.45", Decimal("-123.45")),
        ("1,234.56", Decimal("1234.56")),
        ("(123.45)", Decimal("-123.45")),
        (" 50 ", Decimal("50")),
        ("€7.5", Decimal("7.5")),
    ],
)
def test_parse_amount(text, expected):
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["", "   ", "abc", "1.2.3", "NaN", "Infinity", "1e5"])
def test_parse_amount_rejects(text):
    with pytest.raises(BadRequestError):
        parse_amount(text)


class TestToAmount:
    """Tests for wire-format amount coercion."""

    def test_accepts_plain_forms(self):
        assert to_amount("-50.00") == Decimal("-50.00")
        assert to_amount(".5") == Decimal("0.5")
        assert to_amount(12) == Decimal("12")
        assert to_amount(Decimal("1.10")) == Decimal("1.10")

    @pytest.mark.parametrize("value", [1.5, True, Decimal("NaN"), Decimal("Infinity"), "$5", "1,000"])
    def test_rejects(self, value):
        with pytest.raises(BadRequestError, match="Invalid amount"):
            to_amount(value)

    @pytest.mark.parametrize("value", ["0.00003", "-1.23456", Decimal("0.00001")])
    def test_rejects_more_than_four_decimal_places(self, value):
        with pytest.raises(BadRequestError, match="decimal places"):
            to_amount(value)

    def test_trailing_zeros_do_not_count_as_places(self):
        assert to_amount("1.10000") == Decimal("1.1")
        assert to_amount("0.0001") == Decimal("0.0001")

    @pytest.mark.parametrize("value", ["1000000000000000", "-1000000000000000.00", 10**15])
    def test_rejects_too_large(self, value):
        with pytest.raises(BadRequestError, match="too large"):
            to_amount(value)

    def test_largest_storable_amount(self):
        assert to_amount("999999999999999.9999") == Decimal("999999999999999.9999")


def test_parse_amount_checks_decimal_places():
    with pytest.raises(BadRequestError, match="decimal places"):
        parse_amount("$1.23456")


@pytest.mark.parametrize(
    "amount,expected",
    [
        (Decimal("50"), "50.00"),
        (Decimal("50.0000"), "50.00"),
        (Decimal("-12.5"), "-12.50"),
        (Decimal("0.125"), "0.125"),
        (Decimal("-0.0000"), "0.00"),
        (Decimal("1E+3"), "1000.00"),
    ],
)
def test_format_amount(amount, expected):
    assert format_amount(amount) == expected
