import threading
from collections.abc import Iterable
from datetime import date
from typing import Protocol

from statement_ingestion.models import Transaction


class TransactionLookup(Protocol):
    def get_by_user(self, user_id: str, start: date, end: date) -> list[Transaction]:
        """Stored transactions of ``user_id`` dated within ``[start, end]``."""
        ...


class InMemoryTransactionStore:
    def __init__(self, transactions: Iterable[Transaction] = ()):
        self._lock = threading.Lock()
        self.transactions: list[Transaction] = list(transactions)

    def add(self, transaction: Transaction) -> None:
        with self._lock:
            self.transactions.append(transaction)

    def get_by_user(self, user_id: str, start: date, end: date) -> list[Transaction]:
        with self._lock:
            return [
                transaction
                for transaction in self.transactions
                if transaction.user_id == user_id and start <= transaction.transaction_date <= end
            ]
