import json
import os
import tempfile
import threading
from collections.abc import Iterable
from typing import Protocol

from statement_ingestion.domain.keywords import normalize_keywords
from statement_ingestion.logger import get_logger
from statement_ingestion.models import Category, TransactionType

logger = get_logger(__name__)


class CategoryRepository(Protocol):
    def get_by_type(self, category_type: TransactionType) -> list[Category]:
        ...

    def get_by_id(self, category_id: str) -> Category | None:
        ...

    def update_keywords(self, category_id: str, keywords: list[str]) -> Category | None:
        ...


class InMemoryCategoryRepository:
    def __init__(self, categories: Iterable[Category] = ()):
        self._lock = threading.Lock()
        self.categories: dict[str, Category] = {category.id: category for category in categories}

    def add(self, category: Category) -> None:
        with self._lock:
            self.categories[category.id] = category

    def get_all(self) -> list[Category]:
        with self._lock:
            return list(self.categories.values())

    def get_by_type(self, category_type: TransactionType) -> list[Category]:
        with self._lock:
            return [
                category
                for category in self.categories.values()
                if category.category_type == category_type and category.is_active
            ]

    def get_by_id(self, category_id: str) -> Category | None:
        with self._lock:
            return self.categories.get(category_id)

    def update_keywords(self, category_id: str, keywords: list[str]) -> Category | None:
        with self._lock:
            category = self.categories.get(category_id)
            if category is None:
                return None
            # model_copy skips validators
            updated = category.model_copy(update={"keywords": normalize_keywords(keywords)})
            self.categories[category_id] = updated
        self._on_change()
        return updated

    def _on_change(self) -> None:
        pass


class JsonCategoryRepository(InMemoryCategoryRepository):
    """Categories kept in a JSON file, rewritten after every keyword update."""

    def __init__(self, data_path: str = "categories.json"):
        self.data_path = data_path
        self._write_lock = threading.Lock()
        super().__init__()
        self.load()

    def load(self) -> None:
        if not os.path.exists(self.data_path):
            return
        try:
            with open(self.data_path, encoding="utf-8") as f:
                raw = json.load(f)
        except json.JSONDecodeError:
            logger.warning("[STORAGE] %s is not valid JSON, starting with no categories.", self.data_path)
            return
        loaded = [Category.model_validate(item) for item in raw]
        with self._lock:
            self.categories = {category.id: category for category in loaded}
        logger.debug("[STORAGE] Loaded %d categories from %s", len(loaded), self.data_path)

    def save(self) -> None:
        # One writer at a time; the snapshot is taken inside so the newest state lands last.
        with self._write_lock:
            with self._lock:
                payload = [category.model_dump(mode="json") for category in self.categories.values()]
            directory = os.path.dirname(os.path.abspath(self.data_path))
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".categories-", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(payload, f, indent=2, ensure_ascii=False)
                os.replace(tmp_path, self.data_path)
            except Exception:
                os.unlink(tmp_path)
                raise

    def add(self, category: Category) -> None:
        super().add(category)
        self.save()

    def _on_change(self) -> None:
        self.save()
