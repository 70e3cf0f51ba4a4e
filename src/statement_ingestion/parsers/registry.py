from collections.abc import Iterable

from statement_ingestion.logger import get_logger
from statement_ingestion.parsers.banks import BANK_FORMATS
from statement_ingestion.parsers.base import BankFormat
from statement_ingestion.parsers.generic import GENERIC_FORMAT

logger = get_logger(__name__)


class BankParserRegistry:
    """
    Maps free-form bank names to statement formats.

    Resolution is an exact, case-insensitive match on a format's name or one
    of its aliases, then a substring test in both directions. The substring
    step returns the first format in registration order, so longer names
    have to be registered before short acronyms.
    """

    def __init__(
        self,
        formats: Iterable[BankFormat] = BANK_FORMATS,
        fallback: BankFormat = GENERIC_FORMAT,
    ):
        self.formats: list[BankFormat] = list(formats)
        self.fallback = fallback

    def register(self, bank_format: BankFormat) -> None:
        self.formats.append(bank_format)

    def list_supported_banks(self) -> list[str]:
        return [bank_format.name for bank_format in self.formats]

    def resolve(self, bank_name: str | None) -> BankFormat | None:
        if not bank_name or not bank_name.strip():
            return None
        needle = bank_name.strip().lower()

        for bank_format in self.formats:
            if any(name.lower() == needle for name in bank_format.names):
                return bank_format

        for bank_format in self.formats:
            for name in bank_format.names:
                key = name.lower()
                if key in needle or needle in key:
                    logger.debug("[REGISTRY] '%s' resolved to %s via '%s'", bank_name, bank_format.name, name)
                    return bank_format

        return None

    def resolve_or_fallback(self, bank_name: str | None) -> tuple[BankFormat, bool]:
        """Return the matching format and whether the generic fallback was used."""
        bank_format = self.resolve(bank_name)
        if bank_format is not None:
            return bank_format, False
        logger.info("[REGISTRY] No parser for bank '%s', using generic fallback", bank_name)
        return self.fallback, True
