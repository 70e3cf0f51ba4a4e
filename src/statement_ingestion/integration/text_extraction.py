from typing import Protocol


class IngestionError(Exception):
    """Base class for errors surfaced to callers of the ingestion entry points."""


class EncryptedDocumentError(IngestionError):
    """The document is password protected and its text cannot be read."""


class TextExtractor(Protocol):
    """Turns a statement document into plain text. Implemented outside this package."""

    def extract_text(self, document: bytes) -> str:
        ...

    def is_encrypted(self, document: bytes) -> bool:
        ...

    def page_count(self, document: bytes) -> int:
        ...
