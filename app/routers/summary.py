import logging

from fastapi import APIRouter, Depends

from app.core.config import settings
from app.core.security import get_current_user_id
from app.db import dynamo
from app.utils.aggregator import TransactionAggregator, TransactionRecord

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/")
def get_summary(user_id: str = Depends(get_current_user_id)):
    """
    Balance overview for the home screen: income and expense totals, balance,
    expense breakdown per category name and the most recent transactions.
    """
    snapshot = dynamo.get_transactions_for_user(user_id)
    logger.info(f"Summarizing {len(snapshot)} transactions for user {user_id}")

    aggregator = TransactionAggregator(recent_limit=settings.RECENT_TRANSACTIONS_LIMIT)
    aggregator.ingest(TransactionRecord.from_item(item) for item in snapshot)

    summary = aggregator.current_summary().to_dict()
    summary["transaction_count"] = len(snapshot)
    return summary
