import re
from dataclasses import dataclass
from decimal import Decimal

from statement_ingestion.domain.locale import AMOUNT_RE, GERMAN_DATE_RE, parse_amount, parse_date
from statement_ingestion.logger import get_logger
from statement_ingestion.models import BankStatementInfo

logger = get_logger(__name__)

_FLAGS = re.IGNORECASE | re.MULTILINE


@dataclass(frozen=True)
class MetadataPatterns:
    """Statement-level regexes. Each pattern captures the value(s) in group 1 (and 2 for periods)."""
    account_number: tuple[re.Pattern[str], ...] = ()
    account_holder: tuple[re.Pattern[str], ...] = ()
    period: tuple[re.Pattern[str], ...] = ()
    opening_balance: tuple[re.Pattern[str], ...] = ()
    closing_balance: tuple[re.Pattern[str], ...] = ()


GENERIC_METADATA = MetadataPatterns(
    account_number=(
        re.compile(r"IBAN:?[ \t]*(DE\d{2}(?:[ \t]?\d{4}){4}[ \t]?\d{2})", _FLAGS),
        re.compile(r"Konto(?:nummer)?:?[ \t]*(\d+(?:[ \t]\d+)*)", _FLAGS),
    ),
    account_holder=(
        re.compile(r"Kontoinhaber(?:in)?:[ \t]*([^\n]*\S)", _FLAGS),
        re.compile(r"Kontoinhaber(?:in)?[^\n]*\n[ \t]*([^\n]*\S)", _FLAGS),
    ),
    period=(
        re.compile(
            rf"(?:vom|Zeitraum):?\s*({GERMAN_DATE_RE})\s*(?:bis|-)\s*({GERMAN_DATE_RE})",
            _FLAGS,
        ),
    ),
    opening_balance=(
        re.compile(
            rf"(?:Alter\s+Kontostand|Alter\s+Saldo|Anfangssaldo|Saldo\s+alt)[^\n]*?(?<![\d.,])({AMOUNT_RE})(?![\d,])",
            _FLAGS,
        ),
    ),
    closing_balance=(
        re.compile(
            rf"(?:Neuer\s+Kontostand|Neuer\s+Saldo|Endsaldo|Saldo\s+neu)[^\n]*?(?<![\d.,])({AMOUNT_RE})(?![\d,])",
            _FLAGS,
        ),
    ),
)


def _search(patterns: tuple[re.Pattern[str], ...], text: str) -> re.Match[str] | None:
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return match
    return None


def _find_account_number(patterns: tuple[re.Pattern[str], ...], text: str) -> str | None:
    match = _search(patterns, text)
    if not match:
        return None
    return re.sub(r"\s+", "", match.group(1)) or None


def _find_holder(patterns: tuple[re.Pattern[str], ...], text: str) -> str | None:
    match = _search(patterns, text)
    if not match:
        return None
    return match.group(1).strip() or None


def _find_balance(patterns: tuple[re.Pattern[str], ...], text: str) -> Decimal | None:
    match = _search(patterns, text)
    if not match:
        return None
    return parse_amount(match.group(1))


def _apply(info: BankStatementInfo, patterns: MetadataPatterns, text: str) -> None:
    if info.account_number is None:
        info.account_number = _find_account_number(patterns.account_number, text)
    if info.account_holder is None:
        info.account_holder = _find_holder(patterns.account_holder, text)
    if info.period_start is None and info.period_end is None:
        match = _search(patterns.period, text)
        if match:
            info.period_start = parse_date(match.group(1))
            info.period_end = parse_date(match.group(2))
    if info.opening_balance is None:
        info.opening_balance = _find_balance(patterns.opening_balance, text)
    if info.closing_balance is None:
        info.closing_balance = _find_balance(patterns.closing_balance, text)


def extract_statement_info(
    text: str,
    bank_name: str,
    patterns: MetadataPatterns | None = None,
) -> BankStatementInfo:
    """
    Best-effort extraction of account and period data.

    Bank-specific patterns run first; the generic ones only fill fields that
    are still unset. A field that cannot be found or parsed stays ``None``.
    """
    info = BankStatementInfo(bank_name=bank_name)
    if not text or not text.strip():
        return info

    if patterns is not None:
        _apply(info, patterns, text)
    _apply(info, GENERIC_METADATA, text)

    logger.debug(
        "[METADATA] %s: account=%s holder=%s period=%s..%s opening=%s closing=%s",
        bank_name,
        info.account_number,
        info.account_holder,
        info.period_start,
        info.period_end,
        info.opening_balance,
        info.closing_balance,
    )
    return info
