import re

from statement_ingestion.domain.locale import ISO_DATE_RE
from statement_ingestion.parsers.base import (
    AMOUNT_TAIL,
    DATE_START,
    BankFormat,
    LinePattern,
    booking_value_pattern,
    single_date_pattern,
)

GENERIC_CONFIDENCE = 0.70

_ISO_LINE = re.compile(
    rf"{DATE_START}(?P<value>{ISO_DATE_RE})\s+(?P<description>.+?)\s+{AMOUNT_TAIL}",
    re.IGNORECASE,
)

# Used whenever the bank hint does not resolve to a known format.
GENERIC_FORMAT = BankFormat(
    name="Generic",
    confidence=GENERIC_CONFIDENCE,
    line_patterns=(
        LinePattern("iso_date", _ISO_LINE),
        LinePattern("booking_value", booking_value_pattern()),
        LinePattern("single_date", single_date_pattern()),
    ),
    supported_formats=("PDF-Kontoauszug", "CSV-Export", "Online-Banking Export"),
)
