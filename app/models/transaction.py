from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator


class TransactionType(str, Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _positive_amount(value: Optional[Decimal]) -> Optional[Decimal]:
    if value is not None and value <= 0:
        raise ValueError("Amount must be greater than 0")
    return value


def _selected_category(value: Optional[str]) -> Optional[str]:
    if value is not None and not value.strip():
        raise ValueError("Please select a category")
    return value


class TransactionCreate(BaseModel):
    amount: Decimal
    type: TransactionType = TransactionType.EXPENSE
    category_id: str
    description: str = ""
    occurred_at: datetime = Field(default_factory=utcnow)

    @field_validator("amount")
    @classmethod
    def _check_amount(cls, value):
        return _positive_amount(value)

    @field_validator("category_id")
    @classmethod
    def _check_category(cls, value):
        return _selected_category(value)

    @field_validator("occurred_at")
    @classmethod
    def _normalize_occurred_at(cls, value: datetime) -> datetime:
        return as_utc(value)


class TransactionUpdate(BaseModel):
    amount: Optional[Decimal] = None
    type: Optional[TransactionType] = None
    category_id: Optional[str] = None
    description: Optional[str] = None
    occurred_at: Optional[datetime] = None

    @field_validator("amount")
    @classmethod
    def _check_amount(cls, value):
        return _positive_amount(value)

    @field_validator("category_id")
    @classmethod
    def _check_category(cls, value):
        return _selected_category(value)

    @field_validator("occurred_at")
    @classmethod
    def _normalize_occurred_at(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value) if value is not None else None


class TransactionInDB(BaseModel):
    user_id: str
    transaction_id: str = Field(default_factory=lambda: str(uuid4()))
    amount: Decimal
    type: TransactionType
    category_id: str
    category_name: str = ""
    description: str = ""
    occurred_at: datetime
    recorded_at: datetime = Field(default_factory=utcnow)


class TransactionPublic(BaseModel):
    transaction_id: str
    amount: Decimal
    type: TransactionType
    category_id: str = ""
    category_name: str = ""
    description: str = ""
    occurred_at: Optional[datetime] = None
    recorded_at: Optional[datetime] = None
