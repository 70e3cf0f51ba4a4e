from datetime import date
from decimal import Decimal

import pytest

from statement_ingestion.models import TransactionType
from statement_ingestion.parsers.banks import (
    BANK_FORMATS,
    COMMERZBANK,
    DEUTSCHE_BANK,
    DKB,
    ING,
    POSTBANK,
    VOLKSBANK,
)

DEUTSCHE_BANK_STATEMENT = """Deutsche Bank
Kontoauszug 3 vom 01.03.2024 bis 31.03.2024
Konto 1234567890
Kontoinhaber
Max Mustermann
Alter Kontostand vom 29.02.2024 1.000,00
Buchung Valuta Vorgang Soll/Haben
01.03.2024 03.03.2024 KARTENZAHLUNG REWE SAGT DANKE 03.03 12:30 -45,67
05.03.2024 05.03.2024 LASTSCHRIFT Stadtwerke München MANDATSREF: M123456 -89,00

10.03.2024 GUTSCHRIFT Gehalt Firma GmbH VON Arbeitgeber 2.500,00
Neuer Kontostand vom 31.03.2024 3.365,33
"""


def test_deutsche_bank_card_payment_line():
    transactions, _ = DEUTSCHE_BANK.parse(
        "01.03.2024 03.03.2024 KARTENZAHLUNG REWE SAGT DANKE 03.03 12:30 -45,67"
    )

    assert len(transactions) == 1
    tx = transactions[0]
    assert tx.booking_date == date(2024, 3, 1)
    assert tx.transaction_date == date(2024, 3, 3)
    assert tx.amount == Decimal("45.67")
    assert tx.transaction_type == TransactionType.EXPENSE
    assert tx.transaction_type_display == "Ausgabe"
    assert tx.payment_method == "Kartenzahlung"
    assert tx.merchant_name == "REWE SAGT DANKE"
    assert tx.confidence == 0.9
    assert tx.location is None
    assert tx.is_selected is True


def test_deutsche_bank_full_statement():
    transactions, info = DEUTSCHE_BANK.parse(DEUTSCHE_BANK_STATEMENT)

    assert [tx.amount for tx in transactions] == [Decimal("45.67"), Decimal("89.00"), Decimal("2500.00")]

    debit = transactions[1]
    assert debit.payment_method == "Lastschrift"
    assert debit.merchant_name == "Stadtwerke München"
    assert debit.reference_number == "M123456"

    salary = transactions[2]
    assert salary.transaction_type == TransactionType.INCOME
    assert salary.booking_date == salary.transaction_date == date(2024, 3, 10)
    assert salary.payment_method == "Gutschrift"
    assert salary.merchant_name == "Gehalt Firma GmbH"

    assert info.bank_name == "Deutsche Bank"
    assert info.account_number == "1234567890"
    assert info.account_holder == "Max Mustermann"
    assert info.period_start == date(2024, 3, 1)
    assert info.period_end == date(2024, 3, 31)
    assert info.opening_balance == Decimal("1000.00")
    assert info.closing_balance == Decimal("3365.33")


def test_deutsche_bank_location_after_card_time():
    tx = DEUTSCHE_BANK.parse_line(
        "01.03.2024 03.03.2024 KARTENZAHLUNG REWE SAGT DANKE 03.03 12:30 BERLIN -45,67"
    )
    assert tx is not None
    assert tx.location == "BERLIN"


def test_unparseable_dates_fall_through_to_next_pattern():
    # The second date is impossible, so the single-date pattern takes over.
    tx = DEUTSCHE_BANK.parse_line("01.03.2024 31.02.2024 Einzahlung 100,00")
    assert tx is not None
    assert tx.transaction_date == date(2024, 3, 1)
    assert tx.description == "31.02.2024 Einzahlung"


def test_lines_without_pattern_are_skipped():
    text = "Seite 1 von 2\nSaldo der Abschlussposten\n\n   \n01.03.2024 Einzahlung 100,00"
    transactions = DEUTSCHE_BANK.parse_transactions(text)
    assert len(transactions) == 1


def test_iter_transactions_is_lazy():
    transactions = DEUTSCHE_BANK.iter_transactions(DEUTSCHE_BANK_STATEMENT)
    first = next(transactions)
    assert first.amount == Decimal("45.67")


def test_volksbank_soll_haben_markers():
    transactions = VOLKSBANK.parse_transactions(
        "01.03.2024 01.03.2024 Miete März 850,00 S\n"
        "02.03.2024 02.03.2024 Gehalt März 1.200,00 H"
    )
    assert [(tx.transaction_type, tx.amount) for tx in transactions] == [
        (TransactionType.EXPENSE, Decimal("850.00")),
        (TransactionType.INCOME, Decimal("1200.00")),
    ]


def test_postbank_trailing_minus_and_cleaning():
    tx = POSTBANK.parse_line("01.03.2024 01.03.2024 Überweisung Max Mustermann 100,00-")
    assert tx is not None
    assert tx.transaction_type == TransactionType.EXPENSE
    assert tx.payment_method == "Überweisung"
    assert tx.merchant_name == "Max Mustermann"
    assert tx.description == "Max Mustermann"


def test_commerzbank_currency_suffix():
    tx = COMMERZBANK.parse_line("01.03.2024 01.03.2024 Kartenzahlung Lidl 03.03 -12,34 EUR")
    assert tx is not None
    assert tx.amount == Decimal("12.34")
    assert tx.merchant_name == "Lidl"
    assert tx.confidence == 0.87


def test_dkb_descriptions_without_digits_only():
    assert DKB.parse_line("01.03.2024 02.03.2024 Amazon 123 -10,00") is None
    tx = DKB.parse_line("01.03.2024 02.03.2024 Amazon Marketplace -10,00")
    assert tx is not None
    assert tx.description == "Amazon Marketplace"
    assert tx.confidence == 0.88


def test_ing_single_date_layout():
    tx = ING.parse_line("15.03.2024 Lastschrift Netflix -12,99")
    assert tx is not None
    assert tx.booking_date == tx.transaction_date == date(2024, 3, 15)
    assert tx.payment_method == "Lastschrift"
    assert tx.description == "Netflix"
    assert tx.confidence == 0.85


@pytest.mark.parametrize("bank_format", BANK_FORMATS, ids=lambda bank_format: bank_format.name)
def test_bank_confidence_is_high(bank_format):
    assert 0.85 <= bank_format.confidence <= 0.90
    for tx in bank_format.parse_transactions("01.03.2024 01.03.2024 Einzahlung Bargeld 100,00"):
        assert tx.confidence == bank_format.confidence


def test_empty_text_yields_nothing():
    transactions, info = DEUTSCHE_BANK.parse("")
    assert transactions == []
    assert info.bank_name == "Deutsche Bank"
    assert info.account_number is None


def test_running_balance_column_is_not_the_amount():
    tx = DEUTSCHE_BANK.parse_line(
        "01.03.2024 03.03.2024 KARTENZAHLUNG REWE SAGT DANKE 03.03 12:30 -45,67 1.234,56"
    )

    assert tx is not None
    assert tx.amount == Decimal("45.67")
    assert tx.transaction_type == TransactionType.EXPENSE
    assert tx.merchant_name == "REWE SAGT DANKE"
    assert "1.234,56" not in tx.description


def test_leading_sequence_number_is_ignored():
    tx = DEUTSCHE_BANK.parse_line(
        "1 01.03.2024 03.03.2024 KARTENZAHLUNG REWE SAGT DANKE 03.03 12:30 -45,67"
    )

    assert tx is not None
    assert tx.booking_date == date(2024, 3, 1)
    assert tx.transaction_date == date(2024, 3, 3)
    assert tx.amount == Decimal("45.67")


def test_soll_marker_before_balance_column():
    tx = VOLKSBANK.parse_line("01.03.2024 01.03.2024 Miete März 850,00 S 2.150,00 H")
    assert tx is not None
    assert tx.amount == Decimal("850.00")
    assert tx.transaction_type == TransactionType.EXPENSE
