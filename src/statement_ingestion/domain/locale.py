"""German date and amount normalization.

Parsing is strict: anything that is not exactly one of the accepted shapes
returns ``None`` so callers can treat it as "this line does not match".
"""
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

GERMAN_DATE_FORMAT = "%d.%m.%Y"
ISO_DATE_FORMAT = "%Y-%m-%d"

GERMAN_DATE_RE = r"\d{2}\.\d{2}\.\d{4}"
ISO_DATE_RE = r"\d{4}-\d{2}-\d{2}"
AMOUNT_RE = r"-?(?:0|[1-9]\d{0,2}(?:\.\d{3})*),\d{2}"

_GERMAN_DATE = re.compile(GERMAN_DATE_RE)
_ISO_DATE = re.compile(ISO_DATE_RE)
_AMOUNT = re.compile(AMOUNT_RE)

_NEGATIVE_MARKERS = frozenset({"-", "S"})


def parse_date(text: str | None) -> date | None:
    if not text:
        return None
    value = text.strip()
    if _GERMAN_DATE.fullmatch(value):
        fmt = GERMAN_DATE_FORMAT
    elif _ISO_DATE.fullmatch(value):
        fmt = ISO_DATE_FORMAT
    else:
        return None
    try:
        return datetime.strptime(value, fmt).date()
    except ValueError:
        return None


def parse_amount(text: str | None) -> Decimal | None:
    if not text:
        return None
    value = text.strip()
    if not _AMOUNT.fullmatch(value):
        return None
    try:
        return Decimal(value.replace(".", "").replace(",", "."))
    except InvalidOperation:
        return None


def parse_signed_amount(text: str | None, sign_marker: str | None = None) -> Decimal | None:
    """Parse an amount followed by an optional trailing marker (``-``, ``+``, ``S``, ``H``)."""
    amount = parse_amount(text)
    if amount is None:
        return None
    marker = (sign_marker or "").strip().upper()
    if marker in _NEGATIVE_MARKERS and amount > 0:
        return -amount
    return amount


def format_date(value: date) -> str:
    # strftime does not zero-pad years below 1000 on every platform.
    return f"{value.day:02d}.{value.month:02d}.{value.year:04d}"


def format_amount(value: Decimal) -> str:
    quantized = value.quantize(Decimal("0.01"))
    sign = "-" if quantized.is_signed() else ""
    integral, fraction = f"{abs(quantized):.2f}".split(".")
    grouped = f"{int(integral):,}".replace(",", ".")
    return f"{sign}{grouped},{fraction}"
