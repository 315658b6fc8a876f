from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from app.models.category import CategoryUpdate
from app.models.transaction import TransactionCreate, TransactionType, TransactionUpdate


def test_transaction_defaults():
    transaction = TransactionCreate(amount="19.99", category_id="c1")
    assert transaction.amount == Decimal("19.99")
    assert transaction.type == TransactionType.EXPENSE
    assert transaction.description == ""
    assert transaction.occurred_at.tzinfo is not None


def test_occurred_at_normalized_to_utc():
    local = datetime(2025, 11, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
    transaction = TransactionCreate(amount=1, category_id="c1", occurred_at=local)
    assert transaction.occurred_at == datetime(2025, 11, 1, 10, 0, tzinfo=timezone.utc)

    naive = TransactionCreate(amount=1, category_id="c1", occurred_at=datetime(2025, 11, 1, 12, 0))
    assert naive.occurred_at.tzinfo == timezone.utc


@pytest.mark.parametrize("amount", [0, -3, "-0.01"])
def test_amount_must_be_positive(amount):
    with pytest.raises(ValidationError, match="Amount must be greater than 0"):
        TransactionCreate(amount=amount, category_id="c1")


def test_partial_update_checks_only_given_fields():
    assert TransactionUpdate(description="new").model_dump(exclude_unset=True) == {"description": "new"}
    with pytest.raises(ValidationError, match="Amount must be greater than 0"):
        TransactionUpdate(amount=0)
    with pytest.raises(ValidationError, match="Please select a category"):
        TransactionUpdate(category_id="")


def test_category_update_rejects_blank_name():
    with pytest.raises(ValidationError, match="Category name cannot be empty"):
        CategoryUpdate(name=" ")
