"""Merchant, reference and payment-method heuristics shared by all bank formats.

Every pattern list is evaluated top-down and the first match wins, so the
order of the tuples below is part of the extraction behaviour.
"""
import re

_FLAGS = re.IGNORECASE

MERCHANT_PATTERNS: tuple[re.Pattern[str], ...] = (
    # card payment
    re.compile(r"KARTENZAHLUNG\s+(\w.*?)\s+\d{2}\.\d{2}", _FLAGS),
    re.compile(r"ELV\s+(\w.*?)\s+\d{2}\.\d{2}", _FLAGS),
    # direct debit
    re.compile(r"LASTSCHRIFT\s+(.*?)\s+(?:MANDATSREF|END-TO-END|GLÄUBIGER)", _FLAGS),
    # bank transfer
    re.compile(r"ÜBERWEISUNG\s+(.*?)(?:\s+(?:VERWENDUNGSZWECK|IBAN)|$)", _FLAGS),
    # cash withdrawal
    re.compile(r"(?:BARGELDAUSZAHLUNG|GELDAUTOMAT|AUSZAHLUNG GA)\s+(\w.*?)(?:\s+\d{2}\.\d{2}|$)", _FLAGS),
    # credit note
    re.compile(r"GUTSCHRIFT\s+(.*?)(?:\s+(?:VON|IBAN)|$)", _FLAGS),
)

REFERENCE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"MANDATSREF(?:ERENZ)?[:.\s]+(\w+)", _FLAGS),
    re.compile(r"END-TO-END-REF(?:ERENZ)?[:.\s]+(\w+)", _FLAGS),
    re.compile(r"KUNDENREF(?:ERENZ)?[:.\s]+(\w+)", _FLAGS),
    re.compile(r"\bREF(?:ERENZ)?[:.\s]+(\w+)", _FLAGS),
)

# (keyword, label) in fixed priority order.
PAYMENT_METHODS: tuple[tuple[str, str], ...] = (
    ("KARTENZAHLUNG", "Kartenzahlung"),
    ("LASTSCHRIFT", "Lastschrift"),
    ("ÜBERWEISUNG", "Überweisung"),
    ("GUTSCHRIFT", "Gutschrift"),
    ("DAUERAUFTRAG", "Dauerauftrag"),
)

BOILERPLATE_TOKENS: tuple[str, ...] = (
    "KARTENZAHLUNG",
    "LASTSCHRIFT",
    "ÜBERWEISUNG",
    "GUTSCHRIFT",
    "ELV",
    "DAUERAUFTRAG",
)

_WHITESPACE = re.compile(r"\s+")


def first_group(patterns: tuple[re.Pattern[str], ...], text: str) -> str | None:
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            value = match.group(1).strip()
            if value:
                return value
    return None


def extract_merchant(
    description: str,
    patterns: tuple[re.Pattern[str], ...] = MERCHANT_PATTERNS,
) -> str | None:
    return first_group(patterns, description)


def extract_reference(
    description: str,
    patterns: tuple[re.Pattern[str], ...] = REFERENCE_PATTERNS,
) -> str | None:
    return first_group(patterns, description)


def detect_payment_method(description: str) -> str | None:
    upper = description.upper()
    for keyword, label in PAYMENT_METHODS:
        if keyword in upper:
            return label
    return None


def clean_description(description: str, tokens: tuple[str, ...] = BOILERPLATE_TOKENS) -> str:
    if not description or not description.strip():
        return ""
    cleaned = description
    for token in tokens:
        pattern = r"(?<!\w)" + re.escape(token.strip()) + r"(?!\w)"
        cleaned = re.sub(pattern, " ", cleaned, flags=_FLAGS)
    return _WHITESPACE.sub(" ", cleaned).strip()
