from abc import ABC, abstractmethod
from decimal import Decimal

from statement_ingestion.models import CategorySuggestion, TransactionType


class CategorySuggester(ABC):
    @abstractmethod
    def suggest(
        self,
        description: str,
        merchant_name: str | None = None,
        amount: Decimal | None = None,
        transaction_type: TransactionType = TransactionType.EXPENSE,
    ) -> list[CategorySuggestion]:
        """Rank candidate categories for a transaction, best first."""
        pass

    @abstractmethod
    def learn_from_user_choice(
        self, description: str, merchant_name: str | None, category_id: str
    ) -> list[str] | None:
        """Learn from the category the user picked for a transaction."""
        pass
