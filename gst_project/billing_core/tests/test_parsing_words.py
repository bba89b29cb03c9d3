from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError

from ..services.parsing import (coerce_decimal, parse_non_negative_number,
                                percent_of)
from ..services.words import number_to_words, to_words


# ---------- Number parsing ----------

@pytest.mark.parametrize("raw, expected", [
    (None, "0"),
    ("", "0"),
    ("abc", "0"),
    ("NaN", "0"),
    ("-Infinity", "0"),
    (True, "0"),
    ("1,250.50", "1250.50"),
    (0.1, "0.1"),
    (7, "7"),
    ("-3", "-3"),  # negatives are the forms' job
])
def test_coerce_decimal_is_lenient(raw, expected):
    assert coerce_decimal(raw) == Decimal(expected)


def test_parse_blank_is_zero():
    assert parse_non_negative_number("   ") == Decimal("0")
    assert parse_non_negative_number(None) == Decimal("0")


def test_parse_accepts_non_negative_numbers():
    assert parse_non_negative_number("12.75") == Decimal("12.75")
    assert parse_non_negative_number(3) == Decimal("3")


@pytest.mark.parametrize("raw", ["abc", "-1", "NaN", "Infinity", "-0.01"])
def test_parse_rejects_bad_input_with_field_key(raw):
    with pytest.raises(ValidationError) as excinfo:
        parse_non_negative_number(raw, "quantity")
    assert "quantity" in excinfo.value.message_dict


def test_parse_without_field_raises_plain_error():
    with pytest.raises(ValidationError) as excinfo:
        parse_non_negative_number("-5")
    assert excinfo.value.messages == ["Cannot be negative"]


def test_percent_of_zero_base_is_zero():
    assert percent_of(0, 18) == Decimal("0")
    assert percent_of("", "x") == Decimal("0")
    assert percent_of(200, "2.5") == Decimal("5")


# ---------- Amount in words ----------

def test_zero():
    assert to_words(0) == "Rupees Zero only"


def test_simple_amount():
    assert to_words(1234) == (
        "Rupees One Thousand Two Hundred Thirty Four only")


def test_lakh_and_crore_grouping():
    assert "One Lakh" in to_words(100000)
    assert to_words(12345678) == (
        "Rupees One Crore Twenty Three Lakh Forty Five Thousand "
        "Six Hundred Seventy Eight only")
    # tens of crores and beyond
    assert to_words(Decimal("990000000")) == "Rupees Ninety Nine Crore only"
    assert number_to_words(1_000_000_000) == "One Hundred Crore"


def test_paise_are_spelled_only_when_present():
    assert to_words(Decimal("10.50")) == "Rupees Ten and Fifty Paise only"
    assert to_words(Decimal("10.00")) == "Rupees Ten only"
    assert to_words("0.05") == "Rupees Zero and Five Paise only"


def test_amount_is_rounded_to_whole_paise():
    assert to_words(Decimal("944.9906")) == (
        "Rupees Nine Hundred Forty Four and Ninety Nine Paise only")
    assert to_words(Decimal("0.995")) == "Rupees One only"


@pytest.mark.parametrize("bad", [-1, Decimal("NaN"), float("inf"), "abc"])
def test_invalid_amounts_raise(bad):
    with pytest.raises(ValueError):
        to_words(bad)


@pytest.mark.parametrize("value", [0, 1, 19, 20, 99, 100, 101, 999, 1000,
                                   99999, 100001, 9999999, 10000000,
                                   Decimal("1e30"), Decimal("1e40"),
                                   Decimal("123456789012345678901234567890.125")])
def test_words_never_empty(value):
    text = to_words(value)
    assert text.startswith("Rupees ")
    assert text.endswith(" only")
    assert "  " not in text


def test_very_large_amounts_keep_their_paise():
    # crores recurse: 10**30 is 100 crore crore crore crore
    assert to_words(Decimal("1e30")) == (
        "Rupees One Hundred Crore Crore Crore Crore only")
    assert to_words(Decimal("100000000000000000000000000000.25")).endswith(
        " and Twenty Five Paise only")
