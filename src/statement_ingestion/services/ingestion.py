import asyncio
from collections.abc import Iterable
from time import perf_counter

from statement_ingestion.classifiers.base import CategorySuggester
from statement_ingestion.logger import get_logger
from statement_ingestion.models import BankStatementInfo, ExtractedTransaction, IngestionResult
from statement_ingestion.parsers.metadata import extract_statement_info
from statement_ingestion.parsers.registry import BankParserRegistry

logger = get_logger(__name__)


class IngestionPipeline:
    """Text of one statement in, parsed and categorized transaction candidates out."""

    def __init__(self, registry: BankParserRegistry, categorizer: CategorySuggester) -> None:
        self.registry = registry
        self.categorizer = categorizer

    def ingest(self, text: str, bank_name: str | None) -> IngestionResult:
        bank_format, used_fallback = self.registry.resolve_or_fallback(bank_name)
        statement_bank = bank_format.name
        if used_fallback and bank_name and bank_name.strip():
            statement_bank = bank_name.strip()

        start = perf_counter()
        try:
            transactions = bank_format.parse_transactions(text)
            statement_info = extract_statement_info(text, statement_bank, bank_format.metadata)
        except Exception as exc:
            logger.exception("[INGEST] Parsing a %s statement failed: %s", bank_format.name, exc)
            return IngestionResult(
                statement_info=BankStatementInfo(bank_name=statement_bank),
                parser_name=bank_format.name,
                used_fallback=used_fallback,
            )

        suggested = sum(1 for transaction in transactions if self._attach_suggestion(transaction))
        logger.info(
            "[INGEST] %s: %d transaction(s), %d with suggestion, fallback=%s (%.3fs)",
            bank_format.name,
            len(transactions),
            suggested,
            used_fallback,
            perf_counter() - start,
        )
        return IngestionResult(
            transactions=transactions,
            statement_info=statement_info,
            parser_name=bank_format.name,
            used_fallback=used_fallback,
        )

    async def ingest_async(self, text: str, bank_name: str | None) -> IngestionResult:
        return await asyncio.to_thread(self.ingest, text, bank_name)

    async def ingest_many(self, statements: Iterable[tuple[str, str | None]]) -> list[IngestionResult]:
        """Ingest several ``(text, bank_name)`` pairs concurrently, results in input order."""
        return list(
            await asyncio.gather(*(self.ingest_async(text, bank_name) for text, bank_name in statements))
        )

    def learn_from_user_choice(
        self, description: str, merchant_name: str | None, category_id: str
    ) -> list[str] | None:
        return self.categorizer.learn_from_user_choice(description, merchant_name, category_id)

    def _attach_suggestion(self, transaction: ExtractedTransaction) -> bool:
        try:
            suggestions = self.categorizer.suggest(
                transaction.description,
                transaction.merchant_name,
                transaction.amount,
                transaction.transaction_type,
            )
        except Exception as exc:
            logger.warning("[INGEST] Category suggestion failed for '%s': %s", transaction.description[:50], exc)
            return False

        if not suggestions:
            return False
        top = suggestions[0]
        transaction.suggested_category_id = top.category_id
        transaction.suggested_category_name = top.category_name
        return True
