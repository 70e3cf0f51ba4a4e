from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator, model_validator

from statement_ingestion.domain.keywords import normalize_keywords


class TransactionType(str, Enum):
    INCOME = "Income"
    EXPENSE = "Expense"

    @classmethod
    def from_amount(cls, raw_amount: Decimal) -> "TransactionType":
        return cls.EXPENSE if raw_amount < 0 else cls.INCOME

    @property
    def display_name(self) -> str:
        return "Ausgabe" if self is TransactionType.EXPENSE else "Einnahme"


class ExtractedTransaction(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    transaction_date: date
    booking_date: Optional[date] = None
    amount: Decimal = Field(ge=0)  # magnitude; direction lives in transaction_type
    transaction_type: TransactionType
    description: str = ""
    merchant_name: Optional[str] = None
    reference_number: Optional[str] = None
    payment_method: Optional[str] = None
    location: Optional[str] = None
    confidence: float = Field(ge=0.0, le=1.0)
    suggested_category_id: Optional[str] = None
    suggested_category_name: Optional[str] = None
    is_duplicate: bool = False
    duplicate_transaction_id: Optional[str] = None
    duplicate_reason: Optional[str] = None
    is_selected: bool = True

    @model_validator(mode="after")
    def _default_booking_date(self) -> "ExtractedTransaction":
        if self.booking_date is None:
            self.booking_date = self.transaction_date
        return self

    @classmethod
    def from_signed_amount(cls, raw_amount: Decimal, **fields) -> "ExtractedTransaction":
        return cls(
            amount=abs(raw_amount),
            transaction_type=TransactionType.from_amount(raw_amount),
            **fields,
        )

    @property
    def transaction_type_display(self) -> str:
        return self.transaction_type.display_name


class BankStatementInfo(BaseModel):
    bank_name: str
    currency: str = "EUR"
    account_number: Optional[str] = None
    account_holder: Optional[str] = None
    period_start: Optional[date] = None
    period_end: Optional[date] = None
    opening_balance: Optional[Decimal] = None
    closing_balance: Optional[Decimal] = None


class Category(BaseModel):
    id: str
    name: str
    category_type: TransactionType
    name_german: Optional[str] = None
    keywords: list[str] = Field(default_factory=list)
    parent_id: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    is_active: bool = True
    sort_order: int = 0

    @field_validator("keywords", mode="before")
    @classmethod
    def _normalize_keywords(cls, value):
        return normalize_keywords(value)

    @property
    def display_name(self) -> str:
        return self.name_german or self.name


class CategorySuggestion(BaseModel):
    category_id: str
    category_name: str
    category_icon: Optional[str] = None
    category_color: Optional[str] = None
    confidence: float  # 0.0 to 1.0
    match_reason: str


class Transaction(BaseModel):
    """A transaction that is already stored for a user."""
    id: str
    user_id: str
    transaction_date: date
    amount: Decimal = Field(ge=0)
    transaction_type: TransactionType
    description: str = ""
    merchant_name: Optional[str] = None
    currency: str = "EUR"


class IngestionResult(BaseModel):
    transactions: list[ExtractedTransaction] = Field(default_factory=list)
    statement_info: BankStatementInfo
    parser_name: str
    used_fallback: bool = False
