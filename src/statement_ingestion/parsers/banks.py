"""Statement layouts of the supported German banks."""
import re

from statement_ingestion.domain.locale import AMOUNT_RE, GERMAN_DATE_RE
from statement_ingestion.parsers import heuristics
from statement_ingestion.parsers.base import (
    BankFormat,
    LinePattern,
    booking_value_pattern,
    single_date_pattern,
)
from statement_ingestion.parsers.metadata import MetadataPatterns

_FLAGS = re.IGNORECASE | re.MULTILINE

# Descriptions without digits or minus signs, as printed by the direct banks.
_PLAIN_DESCRIPTION = r"[^\d-]+?"


def _balance(label: str) -> re.Pattern[str]:
    return re.compile(rf"{label}[^\n]*?(?<![\d.,])({AMOUNT_RE})(?![\d,])", _FLAGS)


def _period(prefix: str) -> re.Pattern[str]:
    return re.compile(
        rf"{prefix}\s+({GERMAN_DATE_RE})\s+bis\s+({GERMAN_DATE_RE})",
        _FLAGS,
    )


DEUTSCHE_BANK = BankFormat(
    name="Deutsche Bank",
    confidence=0.90,
    supported_formats=("PDF-Kontoauszug", "Online-Banking Export"),
    line_patterns=(
        LinePattern("booking_value", booking_value_pattern()),
        LinePattern("single_date", single_date_pattern()),
    ),
    merchant_patterns=(
        re.compile(r"KARTENZAHLUNG\s+([^\d]+)\s+\d{2}\.\d{2}", re.IGNORECASE),
        re.compile(r"ELV\s+([^\d]+)\s+\d{2}\.\d{2}", re.IGNORECASE),
        re.compile(r"LASTSCHRIFT\s+(.+?)\s+(?:MANDATSREF|END-TO-END)", re.IGNORECASE),
        re.compile(r"ÜBERWEISUNG\s+(.+?)\s+(?:VERWENDUNGSZWECK|IBAN)", re.IGNORECASE),
        re.compile(r"(?:BARGELDAUSZAHLUNG|GELDAUTOMAT)\s+([^\d]+?)\s+\d{2}\.\d{2}", re.IGNORECASE),
        re.compile(r"GUTSCHRIFT\s+(.+?)\s+(?:VON|IBAN)", re.IGNORECASE),
    ),
    reference_patterns=(
        re.compile(r"MANDATSREF[:\s]+(\w+)", re.IGNORECASE),
        re.compile(r"END-TO-END-REF[:\s]+(\w+)", re.IGNORECASE),
        re.compile(r"KUNDENREFERENZ[:\s]+(\w+)", re.IGNORECASE),
        re.compile(r"\bREF[:\s]+(\w+)", re.IGNORECASE),
    ),
    boilerplate=("FOLGENR.", "BLZ", "DATUM", "UHRZEIT"),
    location_pattern=re.compile(
        r"KARTENZAHLUNG\s+[^\d]*\s+\d{2}\.\d{2}\s+\d{2}:\d{2}\s+(.+)",
        re.IGNORECASE,
    ),
    metadata=MetadataPatterns(
        account_number=(re.compile(r"Konto\s*(\d{10})(?!\d)", _FLAGS),),
        account_holder=(re.compile(r"Kontoinhaber[^\n]*\n[ \t]*([^\n]*\S)", _FLAGS),),
        period=(_period(r"Kontoauszug\s+\d+\s+vom"),),
        opening_balance=(_balance(r"Alter\s+Kontostand"),),
        closing_balance=(_balance(r"Neuer\s+Kontostand"),),
    ),
)

COMMERZBANK = BankFormat(
    name="Commerzbank",
    confidence=0.87,
    line_patterns=(
        LinePattern("booking_value", booking_value_pattern()),
        LinePattern("single_date", single_date_pattern()),
    ),
    boilerplate=heuristics.BOILERPLATE_TOKENS + ("SEPA", "BASISLASTSCHRIFT"),
    metadata=MetadataPatterns(
        account_number=(re.compile(r"Kontonummer[:\s]+(\d{6,10})(?!\d)", _FLAGS),),
        period=(_period(r"Kontoauszug\s+vom"), _period(r"Zeitraum:?")),
        opening_balance=(_balance(r"Kontostand\s+(?:am|per)\s+\S+\s+alt"), _balance(r"Alter\s+Kontostand")),
        closing_balance=(_balance(r"Kontostand\s+(?:am|per)\s+\S+\s+neu"), _balance(r"Neuer\s+Kontostand")),
    ),
)

SPARKASSE = BankFormat(
    name="Sparkasse",
    confidence=0.87,
    supported_formats=("PDF-Kontoauszug", "CSV-Export"),
    aliases=("Stadtsparkasse", "Kreissparkasse"),
    line_patterns=(
        LinePattern("booking_value", booking_value_pattern(_PLAIN_DESCRIPTION)),
    ),
    metadata=MetadataPatterns(
        period=(_period(r"Kontoauszug\s+\d+\s*/\s*\d{4}\s+vom"),),
        opening_balance=(_balance(r"Kontostand\s+am\s+\S+\s+um\s+\S+"), _balance(r"Kontostand\s+alt")),
        closing_balance=(_balance(r"Kontostand\s+neu"),),
    ),
)

POSTBANK = BankFormat(
    name="Postbank",
    confidence=0.86,
    line_patterns=(
        LinePattern("booking_value", booking_value_pattern()),
        LinePattern("single_date", single_date_pattern()),
    ),
    boilerplate=heuristics.BOILERPLATE_TOKENS + ("Referenz", "Buchungstext:"),
    metadata=MetadataPatterns(
        opening_balance=(_balance(r"Alter\s+Kontostand"),),
        closing_balance=(_balance(r"Neuer\s+Kontostand"),),
    ),
)

VOLKSBANK = BankFormat(
    name="Volksbank",
    confidence=0.86,
    aliases=("VR-Bank", "VR Bank"),
    line_patterns=(
        LinePattern("booking_value", booking_value_pattern()),
        LinePattern("single_date", single_date_pattern()),
    ),
    boilerplate=heuristics.BOILERPLATE_TOKENS + ("BASISLASTSCHRIFT", "SEPA"),
    metadata=MetadataPatterns(
        period=(_period(r"Abrechnungszeitraum\s+vom"),),
        opening_balance=(_balance(r"alter\s+Kontostand\s+vom\s+\S+"),),
        closing_balance=(_balance(r"neuer\s+Kontostand\s+vom\s+\S+"),),
    ),
)

RAIFFEISENBANK = BankFormat(
    name="Raiffeisenbank",
    confidence=0.86,
    aliases=("Raiffeisen",),
    line_patterns=(
        LinePattern("booking_value", booking_value_pattern()),
        LinePattern("single_date", single_date_pattern()),
    ),
    boilerplate=heuristics.BOILERPLATE_TOKENS + ("BASISLASTSCHRIFT", "SEPA"),
    metadata=MetadataPatterns(
        period=(_period(r"Abrechnungszeitraum\s+vom"),),
        opening_balance=(_balance(r"alter\s+Kontostand\s+vom\s+\S+"),),
        closing_balance=(_balance(r"neuer\s+Kontostand\s+vom\s+\S+"),),
    ),
)

DKB = BankFormat(
    name="DKB",
    confidence=0.88,
    supported_formats=("PDF-Kontoauszug", "CSV-Export"),
    aliases=("Deutsche Kreditbank",),
    line_patterns=(
        LinePattern("booking_value", booking_value_pattern(_PLAIN_DESCRIPTION)),
    ),
    metadata=MetadataPatterns(
        period=(_period(r"Kontoauszug\s+Nummer\s+\d+\s*/\s*\d{4}\s+vom"),),
    ),
)

ING = BankFormat(
    name="ING",
    confidence=0.85,
    aliases=("ING-DiBa", "ING DiBa"),
    line_patterns=(
        LinePattern("single_date", single_date_pattern(_PLAIN_DESCRIPTION)),
    ),
    metadata=MetadataPatterns(
        period=(_period(r"Kontoauszug\s+vom"),),
        opening_balance=(_balance(r"Alter\s+Saldo"),),
        closing_balance=(_balance(r"Neuer\s+Saldo"),),
    ),
)

# Multi-word names before short acronyms: the registry's substring test takes
# the first hit, and "ing" occurs inside many German place names.
BANK_FORMATS: tuple[BankFormat, ...] = (
    DEUTSCHE_BANK,
    COMMERZBANK,
    SPARKASSE,
    POSTBANK,
    VOLKSBANK,
    RAIFFEISENBANK,
    DKB,
    ING,
)
