import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.core.config import settings
from app.core.security import get_current_user_id
from app.db import dynamo
from app.models.transaction import TransactionCreate, TransactionInDB, TransactionPublic, TransactionType, TransactionUpdate
from app.utils.aggregator import TransactionAggregator, TransactionRecord

router = APIRouter()
logger = logging.getLogger(__name__)


def _require_category(user_id: str, category_id: str) -> dict:
    category = dynamo.get_category(user_id, category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


@router.get("/", response_model=List[TransactionPublic])
def list_transactions(
    type: Optional[TransactionType] = Query(None),
    search: str = Query(""),
    category_id: Optional[str] = Query(None),
    user_id: str = Depends(get_current_user_id),
):
    """
    The user's transactions, newest first, narrowed by type and by a
    case-insensitive search over description and category name.
    """
    snapshot = dynamo.get_transactions_for_user(user_id, category_id=category_id)

    aggregator = TransactionAggregator(recent_limit=settings.RECENT_TRANSACTIONS_LIMIT)
    aggregator.ingest(TransactionRecord.from_item(item) for item in snapshot)
    aggregator.set_selected_kind(type)
    aggregator.set_search_query(search)

    return [TransactionPublic(**record.to_dict()) for record in aggregator.current_filtered_view()]


@router.post("/", response_model=TransactionPublic, status_code=status.HTTP_201_CREATED)
def create_transaction(transaction: TransactionCreate, user_id: str = Depends(get_current_user_id)):
    category = _require_category(user_id, transaction.category_id)

    transaction_db = TransactionInDB(
        user_id=user_id,
        category_name=category.get("name", ""),
        **transaction.model_dump(),
    )
    logger.info(
        f"Adding transaction for user {user_id}: amount={transaction_db.amount}, type={transaction_db.type.value}"
    )
    if not dynamo.put_transaction(transaction_db.model_dump()):
        raise HTTPException(status_code=500, detail="Failed to save transaction")
    return TransactionPublic(**transaction_db.model_dump())


@router.get("/{transaction_id}", response_model=TransactionPublic)
def get_transaction(transaction_id: str, user_id: str = Depends(get_current_user_id)):
    transaction = dynamo.get_transaction(user_id, transaction_id)
    if not transaction:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return TransactionPublic(**transaction)


@router.put("/{transaction_id}", response_model=TransactionPublic)
def update_transaction(
    transaction_id: str,
    transaction_update: TransactionUpdate,
    user_id: str = Depends(get_current_user_id),
):
    mutable_fields = transaction_update.model_dump(exclude_unset=True, exclude_none=True)
    if not mutable_fields:
        raise HTTPException(status_code=400, detail="No fields to update")

    if "category_id" in mutable_fields:
        category = _require_category(user_id, mutable_fields["category_id"])
        mutable_fields["category_name"] = category.get("name", "")

    updated = dynamo.update_transaction(user_id, transaction_id, mutable_fields)
    if not updated:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return TransactionPublic(**updated)


@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_transaction(transaction_id: str, user_id: str = Depends(get_current_user_id)):
    if not dynamo.delete_transaction(user_id, transaction_id):
        raise HTTPException(status_code=404, detail="Transaction not found")
    return None
