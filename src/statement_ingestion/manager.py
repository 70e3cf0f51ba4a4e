from statement_ingestion.classifiers.keywords import KeywordCategorizer
from statement_ingestion.core.configuration import IngestionConfig, load_config
from statement_ingestion.integration.text_extraction import EncryptedDocumentError, TextExtractor
from statement_ingestion.logger import get_logger
from statement_ingestion.models import ExtractedTransaction, IngestionResult
from statement_ingestion.parsers.registry import BankParserRegistry
from statement_ingestion.services.duplicates import DuplicateDetector
from statement_ingestion.services.ingestion import IngestionPipeline
from statement_ingestion.storage.categories import CategoryRepository, JsonCategoryRepository
from statement_ingestion.storage.transactions import InMemoryTransactionStore, TransactionLookup

logger = get_logger(__name__)


class IngestionManager:
    def __init__(
        self,
        config: IngestionConfig | None = None,
        categories: CategoryRepository | None = None,
        transactions: TransactionLookup | None = None,
    ):
        self.config = config or load_config()

        # Categories persist next to the other data files unless injected.
        self.categories = categories or JsonCategoryRepository(self.config.categories_path)
        self.transactions = transactions or InMemoryTransactionStore()

        self.registry = BankParserRegistry()
        self.categorizer = KeywordCategorizer(
            self.categories,
            min_confidence=self.config.suggestion_min_confidence,
            max_results=self.config.suggestion_max_results,
            max_keywords=self.config.learning_max_keywords,
            min_token_length=self.config.learning_min_token_length,
            stop_words=self.config.learning_stop_words,
        )
        self.detector = DuplicateDetector(
            self.transactions,
            threshold=self.config.duplicate_threshold,
            date_window_days=self.config.duplicate_date_window_days,
        )
        self.pipeline = IngestionPipeline(self.registry, self.categorizer)
        logger.debug("[INGEST] Supported banks: %s", ", ".join(self.registry.list_supported_banks()))

    def supported_banks(self) -> list[str]:
        return self.registry.list_supported_banks()

    def ingest(self, text: str, bank_name: str | None) -> IngestionResult:
        return self.pipeline.ingest(text, bank_name)

    def ingest_document(
        self, document: bytes, bank_name: str | None, extractor: TextExtractor
    ) -> IngestionResult:
        """Extract the text of a statement document and ingest it."""
        if extractor.is_encrypted(document):
            raise EncryptedDocumentError("Statement document is password protected.")
        text = extractor.extract_text(document)
        logger.debug("[INGEST] Extracted %d characters from %d page(s)", len(text), extractor.page_count(document))
        return self.pipeline.ingest(text, bank_name)

    def learn_from_user_choice(
        self, description: str, merchant_name: str | None, category_id: str
    ) -> list[str] | None:
        return self.pipeline.learn_from_user_choice(description, merchant_name, category_id)

    def mark_duplicates(
        self, user_id: str, transactions: list[ExtractedTransaction]
    ) -> list[ExtractedTransaction]:
        return self.detector.mark_duplicates(user_id, transactions)
