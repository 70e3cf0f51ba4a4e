from datetime import date
from decimal import Decimal

import pytest

from statement_ingestion.domain.locale import (
    format_amount,
    format_date,
    parse_amount,
    parse_date,
    parse_signed_amount,
)


def test_parse_german_and_iso_dates():
    assert parse_date("03.03.2024") == date(2024, 3, 3)
    assert parse_date("2024-03-03") == date(2024, 3, 3)


@pytest.mark.parametrize("text", ["3.3.2024", "31.02.2024", "03-03-2024", "03.03.24", "", None])
def test_parse_date_rejects_other_shapes(text):
    assert parse_date(text) is None


def test_parse_amount_with_grouping():
    assert parse_amount("1.234,56") == Decimal("1234.56")
    assert parse_amount("-45,67") == Decimal("-45.67")
    assert parse_amount("0,99") == Decimal("0.99")


@pytest.mark.parametrize("text", ["1234,56", "01,00", "45.67", "45,6", "1,234.56", "abc"])
def test_parse_amount_rejects_non_canonical(text):
    assert parse_amount(text) is None


@pytest.mark.parametrize(
    "text,marker,expected",
    [
        ("45,67", "-", Decimal("-45.67")),
        ("45,67", "S", Decimal("-45.67")),
        ("45,67", "H", Decimal("45.67")),
        ("45,67", "+", Decimal("45.67")),
        ("-45,67", None, Decimal("-45.67")),
    ],
)
def test_parse_signed_amount_markers(text, marker, expected):
    assert parse_signed_amount(text, marker) == expected


def test_formatting_round_trips():
    for text in ["01.01.2024", "29.02.2024", "31.12.0999"]:
        assert format_date(parse_date(text)) == text
    for text in ["0,00", "0,99", "-45,67", "1.234,56", "-12.345.678,90"]:
        assert format_amount(parse_amount(text)) == text
