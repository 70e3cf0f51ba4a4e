import re
from collections.abc import Iterator
from dataclasses import dataclass, field

from statement_ingestion.domain.locale import AMOUNT_RE, GERMAN_DATE_RE, parse_date, parse_signed_amount
from statement_ingestion.logger import get_logger
from statement_ingestion.models import BankStatementInfo, ExtractedTransaction
from statement_ingestion.parsers import heuristics
from statement_ingestion.parsers.metadata import MetadataPatterns, extract_statement_info

logger = get_logger(__name__)

# Amount as printed on German statements: "-45,67", "45,67-", "45,67 S", "45,67 EUR".
# It must end at whitespace, so a lazy description stops at the first amount and
# a trailing running-balance column is ignored.
AMOUNT_TAIL = (
    rf"(?P<amount>{AMOUNT_RE})(?:[ \t]*(?P<sign>[+\-]|[SH](?!\w)))?(?:[ \t]*(?:EUR|€))?(?=\s|$)"
)

# Dates start a token; anything before them (a sequence number, say) is ignored.
DATE_START = r"(?<!\S)"


def booking_value_pattern(description: str = r".+?") -> re.Pattern[str]:
    """Booking date, value date, description, amount."""
    return re.compile(
        rf"{DATE_START}(?P<booking>{GERMAN_DATE_RE})\s+(?P<value>{GERMAN_DATE_RE})\s+"
        rf"(?P<description>{description})\s+{AMOUNT_TAIL}",
        re.IGNORECASE,
    )


def single_date_pattern(description: str = r".+?") -> re.Pattern[str]:
    """Date, description, amount, for layouts without a separate booking date."""
    return re.compile(
        rf"{DATE_START}(?P<value>{GERMAN_DATE_RE})\s+(?P<description>{description})\s+{AMOUNT_TAIL}",
        re.IGNORECASE,
    )


@dataclass(frozen=True)
class LinePattern:
    name: str
    regex: re.Pattern[str]


@dataclass(frozen=True)
class BankFormat:
    """
    One supported statement layout.

    All banks share the same extraction behaviour and differ only in the
    data held here: line patterns, heuristic pattern lists, boilerplate
    tokens, metadata regexes and the fixed confidence assigned to every
    transaction the format produces.
    """
    name: str
    confidence: float
    line_patterns: tuple[LinePattern, ...]
    aliases: tuple[str, ...] = ()
    merchant_patterns: tuple[re.Pattern[str], ...] = heuristics.MERCHANT_PATTERNS
    reference_patterns: tuple[re.Pattern[str], ...] = heuristics.REFERENCE_PATTERNS
    boilerplate: tuple[str, ...] = heuristics.BOILERPLATE_TOKENS
    location_pattern: re.Pattern[str] | None = None
    metadata: MetadataPatterns = field(default_factory=MetadataPatterns)
    supported_formats: tuple[str, ...] = ("PDF-Kontoauszug",)

    @property
    def names(self) -> tuple[str, ...]:
        return (self.name, *self.aliases)

    def parse(self, text: str) -> tuple[list[ExtractedTransaction], BankStatementInfo]:
        return self.parse_transactions(text), self.extract_info(text)

    def parse_transactions(self, text: str) -> list[ExtractedTransaction]:
        transactions = list(self.iter_transactions(text))
        logger.debug("[PARSE] %s: %d transactions extracted", self.name, len(transactions))
        return transactions

    def iter_transactions(self, text: str | None) -> Iterator[ExtractedTransaction]:
        if not text:
            return
        for raw_line in text.splitlines():
            line = raw_line.strip()
            if not line:
                continue
            transaction = self.parse_line(line)
            if transaction is not None:
                yield transaction

    def parse_line(self, line: str) -> ExtractedTransaction | None:
        for pattern in self.line_patterns:
            match = pattern.regex.search(line)
            if not match:
                continue
            transaction = self._build_transaction(match)
            if transaction is not None:
                return transaction
            logger.debug("[PARSE] %s: pattern '%s' matched but did not normalize: %s",
                         self.name, pattern.name, line)
        return None

    def extract_info(self, text: str) -> BankStatementInfo:
        return extract_statement_info(text, self.name, self.metadata)

    def _build_transaction(self, match: re.Match[str]) -> ExtractedTransaction | None:
        groups = match.groupdict()
        transaction_date = parse_date(groups.get("value"))
        if transaction_date is None:
            return None

        booking_date = transaction_date
        if groups.get("booking"):
            booking_date = parse_date(groups["booking"])
            if booking_date is None:
                return None

        raw_amount = parse_signed_amount(groups.get("amount"), groups.get("sign"))
        if raw_amount is None:
            return None

        raw_description = (groups.get("description") or "").strip()
        return ExtractedTransaction.from_signed_amount(
            raw_amount,
            transaction_date=transaction_date,
            booking_date=booking_date,
            description=heuristics.clean_description(raw_description, self.boilerplate),
            merchant_name=heuristics.extract_merchant(raw_description, self.merchant_patterns),
            reference_number=heuristics.extract_reference(raw_description, self.reference_patterns),
            payment_method=heuristics.detect_payment_method(raw_description),
            location=self._extract_location(raw_description),
            confidence=self.confidence,
        )

    def _extract_location(self, description: str) -> str | None:
        if self.location_pattern is None:
            return None
        match = self.location_pattern.search(description)
        if not match:
            return None
        return match.group(1).strip() or None
