from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator

from app.models.transaction import TransactionType


def _named(value: Optional[str]) -> Optional[str]:
    if value is not None:
        value = value.strip()
        if not value:
            raise ValueError("Category name cannot be empty")
    return value


class CategoryCreate(BaseModel):
    name: str
    type: TransactionType = TransactionType.EXPENSE
    icon: str = ""
    color: str = ""

    @field_validator("name")
    @classmethod
    def _check_name(cls, value):
        return _named(value)


class CategoryUpdate(BaseModel):
    name: Optional[str] = None
    type: Optional[TransactionType] = None
    icon: Optional[str] = None
    color: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _check_name(cls, value):
        return _named(value)


class CategoryInDB(BaseModel):
    user_id: str
    category_id: str = Field(default_factory=lambda: str(uuid4()))
    name: str
    type: TransactionType = TransactionType.EXPENSE
    icon: str = ""
    color: str = ""


class CategoryPublic(BaseModel):
    category_id: str
    name: str
    type: TransactionType = TransactionType.EXPENSE
    icon: str = ""
    color: str = ""


DEFAULT_CATEGORIES = [
    CategoryCreate(name="Salary", type=TransactionType.INCOME, icon="work", color="#2E7D32"),
    CategoryCreate(name="Freelance", type=TransactionType.INCOME, icon="laptop", color="#388E3C"),
    CategoryCreate(name="Investments", type=TransactionType.INCOME, icon="trending_up", color="#43A047"),
    CategoryCreate(name="Gifts", type=TransactionType.INCOME, icon="card_giftcard", color="#66BB6A"),
    CategoryCreate(name="Food", icon="restaurant", color="#E53935"),
    CategoryCreate(name="Transport", icon="directions_car", color="#FB8C00"),
    CategoryCreate(name="Rent", icon="home", color="#8E24AA"),
    CategoryCreate(name="Shopping", icon="shopping_cart", color="#D81B60"),
    CategoryCreate(name="Utilities", icon="bolt", color="#FDD835"),
    CategoryCreate(name="Health", icon="local_hospital", color="#00ACC1"),
    CategoryCreate(name="Entertainment", icon="movie", color="#5E35B1"),
    CategoryCreate(name="Education", icon="school", color="#3949AB"),
]
