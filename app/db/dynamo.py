import logging
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

import boto3
from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import ClientError

from app.core.config import settings

logger = logging.getLogger(__name__)

# Initialize DynamoDB resource
dynamodb = boto3.resource("dynamodb", region_name=settings.DYNAMO_REGION)

# Get table references
users_table = dynamodb.Table(settings.DYNAMO_USERS_TABLE)
categories_table = dynamodb.Table(settings.DYNAMO_CATEGORIES_TABLE)
transactions_table = dynamodb.Table(settings.DYNAMO_TRANSACTIONS_TABLE)


def _error_message(e: ClientError) -> str:
    return e.response.get("Error", {}).get("Message", str(e))


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


def get_user_by_email(email: str):
    """Query the Users table by email (assumes a GSI exists on email)."""
    try:
        response = users_table.query(
            IndexName="email-index",
            KeyConditionExpression=Key("email").eq(email),
        )
        return _from_dynamo(response["Items"][0]) if response["Items"] else None
    except ClientError as e:
        logger.error(f"get_user_by_email failed: {_error_message(e)}")
        return None


def get_user_by_id(user_id: str):
    """Get user by user_id from the Users table."""
    try:
        response = users_table.get_item(Key={"user_id": user_id})
        item = response.get("Item")
        return _from_dynamo(item) if item else None
    except ClientError as e:
        logger.error(f"get_user_by_id failed: {_error_message(e)}")
        return None


def put_user(user_item: dict):
    """Insert a new user into the Users table."""
    try:
        users_table.put_item(Item=_convert_for_dynamo(user_item))
        return True
    except ClientError as e:
        logger.error(f"put_user failed: {_error_message(e)}")
        return False


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------


def put_category(category_item: dict):
    """Insert or replace a category for a user."""
    try:
        categories_table.put_item(Item=_convert_for_dynamo(category_item))
        return True
    except ClientError as e:
        logger.error(f"put_category failed: {_error_message(e)}")
        return False


def get_categories_for_user(user_id: str, category_type: Optional[str] = None):
    """
    All categories of a user, optionally only those of one transaction type,
    sorted by name.
    """
    query_kwargs: Dict[str, Any] = {"KeyConditionExpression": Key("user_id").eq(user_id)}
    if category_type:
        query_kwargs["FilterExpression"] = Attr("type").eq(_enum_value(category_type))

    try:
        items = _query_all(categories_table, **query_kwargs)
    except ClientError as e:
        logger.error(f"get_categories_for_user failed: {_error_message(e)}")
        return []
    categories = [_from_dynamo(item) for item in items]
    return sorted(categories, key=lambda c: str(c.get("name", "")).lower())


def get_category(user_id: str, category_id: str):
    """Fetch a single category item."""
    try:
        response = categories_table.get_item(Key={"user_id": user_id, "category_id": category_id})
        item = response.get("Item")
        return _from_dynamo(item) if item else None
    except ClientError as e:
        logger.error(f"get_category failed: {_error_message(e)}")
        return None


def update_category(user_id: str, category_id: str, updates: dict):
    """Apply partial updates to a category. Returns the updated item or None."""
    return _update_item(categories_table, {"user_id": user_id, "category_id": category_id}, updates)


def delete_category(user_id: str, category_id: str):
    """Delete a category. Transactions referencing it are left untouched."""
    return _delete_item(categories_table, {"user_id": user_id, "category_id": category_id})


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------


def put_transaction(transaction_item: dict):
    """Insert or replace a transaction for a user."""
    try:
        transactions_table.put_item(Item=_convert_for_dynamo(transaction_item))
        return True
    except ClientError as e:
        logger.error(f"put_transaction failed: {_error_message(e)}")
        return False


def get_transactions_for_user(
    user_id: str,
    category_id: Optional[str] = None,
):
    """
    Full snapshot of a user's transactions, newest ``occurred_at`` first.

    Sorting happens here rather than through an index so the table only needs
    its primary key. A failed query yields an empty snapshot.
    """
    query_kwargs: Dict[str, Any] = {"KeyConditionExpression": Key("user_id").eq(user_id)}
    if category_id:
        query_kwargs["FilterExpression"] = Attr("category_id").eq(category_id)

    try:
        items = _query_all(transactions_table, **query_kwargs)
    except ClientError as e:
        logger.error(f"get_transactions_for_user failed: {_error_message(e)}")
        return []
    transactions = [_from_dynamo(item) for item in items]
    return sorted(transactions, key=_occurred_at_key, reverse=True)


def get_transaction(user_id: str, transaction_id: str):
    """Fetch a single transaction item."""
    try:
        response = transactions_table.get_item(Key={"user_id": user_id, "transaction_id": transaction_id})
        item = response.get("Item")
        return _from_dynamo(item) if item else None
    except ClientError as e:
        logger.error(f"get_transaction failed: {_error_message(e)}")
        return None


def update_transaction(user_id: str, transaction_id: str, updates: dict):
    """Apply partial updates to a transaction. Returns the updated item or None."""
    return _update_item(transactions_table, {"user_id": user_id, "transaction_id": transaction_id}, updates)


def delete_transaction(user_id: str, transaction_id: str):
    """Delete a specific transaction item."""
    return _delete_item(transactions_table, {"user_id": user_id, "transaction_id": transaction_id})


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _query_all(table, **query_kwargs) -> List[dict]:
    """Run a query and follow LastEvaluatedKey until every page is read."""
    items: List[dict] = []
    while True:
        response = table.query(**query_kwargs)
        items.extend(response.get("Items", []))
        last_key = response.get("LastEvaluatedKey")
        if not last_key:
            return items
        query_kwargs["ExclusiveStartKey"] = last_key


def _update_item(table, key: dict, updates: dict):
    if not updates:
        return None

    update_expression_parts = []
    expression_attribute_values = {}
    expression_attribute_names = {}

    for idx, (field, value) in enumerate(updates.items()):
        placeholder = f"#f{idx}"
        value_placeholder = f":v{idx}"
        update_expression_parts.append(f"{placeholder} = {value_placeholder}")
        expression_attribute_names[placeholder] = field
        expression_attribute_values[value_placeholder] = value

    update_expression = "SET " + ", ".join(update_expression_parts)
    # Only update items that exist; otherwise DynamoDB would create one
    condition = " AND ".join(f"attribute_exists({name})" for name in key)

    try:
        response = table.update_item(
            Key=key,
            UpdateExpression=update_expression,
            ConditionExpression=condition,
            ExpressionAttributeNames=expression_attribute_names,
            ExpressionAttributeValues=_convert_for_dynamo(expression_attribute_values),
            ReturnValues="ALL_NEW",
        )
        attributes = response.get("Attributes")
        return _from_dynamo(attributes) if attributes else None
    except ClientError as e:
        if e.response.get("Error", {}).get("Code") != "ConditionalCheckFailedException":
            logger.error(f"update on {table.name} failed: {_error_message(e)}")
        return None


def _delete_item(table, key: dict):
    try:
        response = table.delete_item(Key=key, ReturnValues="ALL_OLD")
        return "Attributes" in response
    except ClientError as e:
        logger.error(f"delete on {table.name} failed: {_error_message(e)}")
        return False


def _enum_value(value: Any):
    return value.value if isinstance(value, Enum) else value


def _occurred_at_key(item: dict) -> datetime:
    raw = item.get("occurred_at")
    try:
        parsed = datetime.fromisoformat(raw) if isinstance(raw, str) else None
    except ValueError:
        parsed = None
    if parsed is None:
        return datetime.min.replace(tzinfo=timezone.utc)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed


def _convert_for_dynamo(obj: Any):
    """
    Recursively convert values DynamoDB cannot store: floats become Decimal,
    enums their value, datetimes ISO-8601 strings.
    """
    if isinstance(obj, float):
        return Decimal(str(obj))
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, dict):
        return {k: _convert_for_dynamo(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_convert_for_dynamo(v) for v in obj]
    return obj


def _from_dynamo(obj: Any):
    """
    Recursively convert DynamoDB items back to plain Python values. Numbers
    stay Decimal so amounts keep full precision; sets become sorted lists.
    """
    if isinstance(obj, list):
        return [_from_dynamo(item) for item in obj]
    if isinstance(obj, dict):
        return {k: _from_dynamo(v) for k, v in obj.items()}
    if isinstance(obj, set):
        return sorted(_from_dynamo(item) for item in obj)
    return obj
