import threading
from collections.abc import Iterable
from decimal import Decimal

from statement_ingestion.classifiers import vocabulary
from statement_ingestion.classifiers.base import CategorySuggester
from statement_ingestion.domain.keywords import (
    STOP_WORDS,
    contains_term,
    extract_learnable_terms,
    merge_keywords,
)
from statement_ingestion.logger import get_logger
from statement_ingestion.models import Category, CategorySuggestion, TransactionType
from statement_ingestion.storage.categories import CategoryRepository

logger = get_logger(__name__)

KEYWORD_WEIGHT = 0.8
GERMAN_KEYWORD_WEIGHT = 0.6
MERCHANT_WEIGHT = 0.9


def _search_text(description: str | None, merchant_name: str | None) -> str:
    return f"{description or ''} {merchant_name or ''}".strip().lower()


def _matches(search_text: str, terms: Iterable[str]) -> list[str]:
    return [term for term in terms if contains_term(search_text, term)]


class KeywordCategorizer(CategorySuggester):
    """
    Scores a user's categories against a transaction's description and merchant.

    A category earns points for every learned keyword found in the text, for
    every built-in German keyword of the concept its name maps to, for every
    well-known merchant of that concept and, slightly, for an amount that is
    typical for it. Scores are capped at 1.0.

    Learning is the only write path: it merges tokens of the transaction into
    the chosen category's keywords while holding that category's lock.
    """

    def __init__(
        self,
        repository: CategoryRepository,
        min_confidence: float = 0.3,
        max_results: int = 5,
        max_keywords: int = 20,
        min_token_length: int = 4,
        stop_words: Iterable[str] = STOP_WORDS,
    ):
        self.repository = repository
        self.min_confidence = min_confidence
        self.max_results = max_results
        self.max_keywords = max_keywords
        self.min_token_length = min_token_length
        self.stop_words = frozenset(word.lower() for word in stop_words)
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def suggest(
        self,
        description: str,
        merchant_name: str | None = None,
        amount: Decimal | None = None,
        transaction_type: TransactionType = TransactionType.EXPENSE,
    ) -> list[CategorySuggestion]:
        search_text = _search_text(description, merchant_name)
        if not search_text:
            return []

        scored: list[tuple[Category, float]] = []
        for category in self.repository.get_by_type(transaction_type):
            if not category.is_active:
                continue
            score = self._score(category, search_text, amount)
            if score > self.min_confidence:
                scored.append((category, score))

        scored.sort(key=lambda item: (-item[1], item[0].sort_order, item[0].display_name))
        suggestions = [
            CategorySuggestion(
                category_id=category.id,
                category_name=category.display_name,
                category_icon=category.icon,
                category_color=category.color,
                confidence=score,
                match_reason=self._match_reason(category, search_text),
            )
            for category, score in scored[: self.max_results]
        ]
        logger.debug(
            "[SUGGEST] %d suggestion(s) for '%s': %s",
            len(suggestions),
            search_text[:50],
            [(s.category_name, s.confidence) for s in suggestions],
        )
        return suggestions

    def calculate_category_confidence(
        self,
        description: str,
        merchant_name: str | None,
        category_id: str,
        amount: Decimal | None = None,
    ) -> float:
        category = self.repository.get_by_id(category_id)
        if category is None:
            return 0.0
        return self._score(category, _search_text(description, merchant_name), amount)

    def get_keyword_weights(self, category_id: str) -> dict[str, float]:
        category = self.repository.get_by_id(category_id)
        if category is None:
            return {}
        return {keyword: KEYWORD_WEIGHT for keyword in category.keywords}

    def update_category_keywords(self, category_id: str, keywords: Iterable[str]) -> list[str] | None:
        """Replace a category's keywords, keeping at most ``max_keywords``."""
        if self.repository.get_by_id(category_id) is None:
            logger.debug("[LEARN] Unknown category %s, keywords not updated.", category_id)
            return None
        with self._lock_for(category_id):
            capped = merge_keywords([], keywords, self.max_keywords)
            self.repository.update_keywords(category_id, capped)
            return capped

    def is_german_merchant(self, merchant_name: str | None) -> bool:
        if not merchant_name or not merchant_name.strip():
            return False
        return any(contains_term(merchant_name, merchant) for merchant in vocabulary.all_merchants())

    def learn_from_user_choice(
        self, description: str, merchant_name: str | None, category_id: str
    ) -> list[str] | None:
        if self.repository.get_by_id(category_id) is None:
            logger.debug("[LEARN] Unknown category %s, nothing learned.", category_id)
            return None
        with self._lock_for(category_id):
            # Re-read under the lock so concurrent learners merge onto the latest keywords.
            category = self.repository.get_by_id(category_id)
            if category is None:
                return None

            terms = extract_learnable_terms(
                _search_text(description, merchant_name),
                stop_words=self.stop_words,
                min_length=self.min_token_length,
            )
            keywords = merge_keywords(category.keywords, terms, self.max_keywords)
            if keywords == category.keywords:
                return keywords

            self.repository.update_keywords(category_id, keywords)
            logger.debug(
                "[LEARN] Category '%s' now has %d keyword(s) (added %s)",
                category.display_name,
                len(keywords),
                [keyword for keyword in keywords if keyword not in category.keywords],
            )
            return keywords

    def _lock_for(self, category_id: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(category_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[category_id] = lock
            return lock

    def _concept(self, category: Category) -> str | None:
        return vocabulary.concept_for_category(category.display_name) or vocabulary.concept_for_category(
            category.name
        )

    def _score(self, category: Category, search_text: str, amount: Decimal | None) -> float:
        score = KEYWORD_WEIGHT * len(_matches(search_text, category.keywords))

        concept = self._concept(category)
        if concept:
            german_keywords = vocabulary.GERMAN_CATEGORY_KEYWORDS.get(concept, ())
            score += GERMAN_KEYWORD_WEIGHT * len(_matches(search_text, german_keywords))
            merchants = vocabulary.GERMAN_MERCHANTS.get(concept, ())
            score += MERCHANT_WEIGHT * len(_matches(search_text, merchants))

        score += vocabulary.amount_hint(category.display_name, amount)
        return round(min(score, 1.0), 4)

    def _match_reason(self, category: Category, search_text: str) -> str:
        keyword_hits = _matches(search_text, category.keywords)
        if keyword_hits:
            return f"Keyword match: {keyword_hits[0]}"

        concept = self._concept(category)
        if concept:
            german_hits = _matches(search_text, vocabulary.GERMAN_CATEGORY_KEYWORDS.get(concept, ()))
            if german_hits:
                return f"German keyword: {german_hits[0]}"
            merchant_hits = _matches(search_text, vocabulary.GERMAN_MERCHANTS.get(concept, ()))
            if merchant_hits:
                return f"Known merchant: {merchant_hits[0]}"

        return "Pattern recognition"
