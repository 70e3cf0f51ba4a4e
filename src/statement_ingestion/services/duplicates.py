from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal

from rapidfuzz import fuzz

from statement_ingestion.domain.locale import format_date
from statement_ingestion.logger import get_logger
from statement_ingestion.models import ExtractedTransaction, Transaction
from statement_ingestion.storage.transactions import TransactionLookup

logger = get_logger(__name__)

AMOUNT_WEIGHT = 0.40
DATE_WEIGHT = 0.30
TEXT_WEIGHT = 0.25
TYPE_WEIGHT = 0.05

# Date similarity reaches zero at this distance.
DATE_DECAY_DAYS = 7


@dataclass(frozen=True)
class DuplicateMatch:
    transaction: Transaction
    similarity: float


def _text(description: str | None, merchant_name: str | None) -> str:
    return " ".join(f"{description or ''} {merchant_name or ''}".lower().split())


class DuplicateDetector:
    """
    Flags extracted transactions that were probably imported before.

    Candidates are the user's stored transactions within ``date_window_days``
    and ``amount_tolerance`` of the extracted one; each is scored and kept when
    the score reaches ``threshold``.
    """

    def __init__(
        self,
        lookup: TransactionLookup,
        threshold: float = 0.8,
        date_window_days: int = 3,
        amount_tolerance: float = 0.01,
    ):
        self.lookup = lookup
        self.threshold = threshold
        self.date_window_days = date_window_days
        self.amount_tolerance = Decimal(str(amount_tolerance))

    def score(self, existing: Transaction, extracted: ExtractedTransaction) -> float:
        amount_similarity = 1.0 if self._amount_matches(existing, extracted) else 0.0

        days_apart = abs((existing.transaction_date - extracted.transaction_date).days)
        date_similarity = max(0.0, 1.0 - days_apart / DATE_DECAY_DAYS)

        text_similarity = self._text_similarity(
            _text(existing.description, existing.merchant_name),
            _text(extracted.description, extracted.merchant_name),
        )
        type_similarity = 1.0 if existing.transaction_type == extracted.transaction_type else 0.0

        # Text and type only count as far as amount or date already agree.
        anchor = max(amount_similarity, date_similarity)
        total = (
            AMOUNT_WEIGHT * amount_similarity
            + DATE_WEIGHT * date_similarity
            + (TEXT_WEIGHT * text_similarity + TYPE_WEIGHT * type_similarity) * anchor
        )
        return round(min(max(total, 0.0), 1.0), 4)

    def find_duplicates(self, user_id: str, extracted: ExtractedTransaction) -> list[DuplicateMatch]:
        window = timedelta(days=self.date_window_days)
        candidates = self.lookup.get_by_user(
            user_id,
            extracted.transaction_date - window,
            extracted.transaction_date + window,
        )

        matches = []
        for candidate in candidates:
            if not self._amount_matches(candidate, extracted):
                continue
            similarity = self.score(candidate, extracted)
            if similarity >= self.threshold:
                matches.append(DuplicateMatch(transaction=candidate, similarity=similarity))

        matches.sort(key=lambda match: match.similarity, reverse=True)
        return matches

    def is_duplicate(self, user_id: str, extracted: ExtractedTransaction) -> bool:
        return bool(self.find_duplicates(user_id, extracted))

    def mark_duplicates(
        self, user_id: str, transactions: list[ExtractedTransaction]
    ) -> list[ExtractedTransaction]:
        flagged = 0
        for transaction in transactions:
            matches = self.find_duplicates(user_id, transaction)
            if not matches:
                continue
            best = matches[0]
            transaction.is_duplicate = True
            transaction.duplicate_transaction_id = best.transaction.id
            transaction.duplicate_reason = (
                f"Mögliches Duplikat von Transaktion vom {format_date(best.transaction.transaction_date)}"
            )
            transaction.is_selected = False
            flagged += 1
            logger.debug(
                "[DUPLICATE] %s matches stored %s (similarity %.2f)",
                transaction.id,
                best.transaction.id,
                best.similarity,
            )

        if flagged:
            logger.info("[DUPLICATE] %d of %d transaction(s) flagged for user %s", flagged, len(transactions), user_id)
        return transactions

    def _amount_matches(self, existing: Transaction, extracted: ExtractedTransaction) -> bool:
        return abs(existing.amount - extracted.amount) <= self.amount_tolerance

    @staticmethod
    def _text_similarity(left: str, right: str) -> float:
        if not left and not right:
            return 1.0
        if not left or not right:
            return 0.0
        return fuzz.token_sort_ratio(left, right) / 100.0
