from __future__ import annotations

from collections import defaultdict
from dataclasses import asdict, dataclass, field, replace
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional

from app.models.transaction import TransactionType

ZERO = Decimal("0")


@dataclass(frozen=True)
class TransactionRecord:
    """A single transaction as seen by the aggregator."""

    id: str
    amount: Decimal
    kind: TransactionType
    category_id: str = ""
    category_name: str = ""
    description: str = ""
    occurred_at: Optional[datetime] = None
    recorded_at: Optional[datetime] = None

    @classmethod
    def from_item(cls, item: Mapping[str, Any]) -> "TransactionRecord":
        """
        Build a record from a stored transaction item. Missing or odd fields
        are tolerated rather than rejected.
        """
        return cls(
            id=str(item.get("transaction_id", item.get("id", ""))),
            amount=_as_decimal(item.get("amount")),
            kind=_as_kind(item.get("type", item.get("kind"))),
            category_id=str(item.get("category_id") or ""),
            category_name=str(item.get("category_name") or ""),
            description=str(item.get("description") or ""),
            occurred_at=_as_datetime(item.get("occurred_at")),
            recorded_at=_as_datetime(item.get("recorded_at")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "transaction_id": self.id,
            "amount": self.amount,
            "type": self.kind.value,
            "category_id": self.category_id,
            "category_name": self.category_name,
            "description": self.description,
            "occurred_at": self.occurred_at.isoformat() if self.occurred_at else None,
            "recorded_at": self.recorded_at.isoformat() if self.recorded_at else None,
        }


@dataclass(frozen=True)
class AggregationResult:
    """Totals derived from one full snapshot."""

    total_income: Decimal = ZERO
    total_expense: Decimal = ZERO
    balance: Decimal = ZERO
    category_breakdown: Dict[str, Decimal] = field(default_factory=dict)
    recent_transactions: List[TransactionRecord] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["recent_transactions"] = [record.to_dict() for record in self.recent_transactions]
        return data


@dataclass
class FilterState:
    search_query: str = ""
    selected_kind: Optional[TransactionType] = None

    def matches(self, record: TransactionRecord) -> bool:
        if self.selected_kind is not None and record.kind != self.selected_kind:
            return False
        if not self.search_query.strip():
            return True
        query = self.search_query.lower()
        return query in record.description.lower() or query in record.category_name.lower()


class TransactionAggregator:
    """
    Holds the latest transaction snapshot of one user together with the
    current filter, and keeps the summary and the filtered view in step with
    both.

    ``ingest`` replaces the snapshot wholesale and recomputes everything.
    Filter changes recompute only the filtered view; totals always describe
    the full, unfiltered snapshot. Every call runs to completion
    synchronously and there is no locking, so an instance must not be shared
    between threads.
    """

    def __init__(self, recent_limit: int = 5, filters: Optional[FilterState] = None) -> None:
        self._recent_limit = recent_limit
        self._filters = filters if filters is not None else FilterState()
        self._snapshot: List[TransactionRecord] = []
        self._summary = AggregationResult()
        self._filtered: List[TransactionRecord] = []

    @property
    def filters(self) -> FilterState:
        return self._filters

    def ingest(self, transactions: Iterable[TransactionRecord]) -> None:
        self._snapshot = list(transactions)
        self._summary = self._summarize(self._snapshot)
        self._filtered = self._apply_filters()

    def set_search_query(self, query: str) -> None:
        self._filters.search_query = query
        self._filtered = self._apply_filters()

    def set_selected_kind(self, kind: Optional[TransactionType]) -> None:
        self._filters.selected_kind = kind
        self._filtered = self._apply_filters()

    def current_summary(self) -> AggregationResult:
        return replace(
            self._summary,
            category_breakdown=dict(self._summary.category_breakdown),
            recent_transactions=list(self._summary.recent_transactions),
        )

    def current_filtered_view(self) -> List[TransactionRecord]:
        return list(self._filtered)

    def follow(self, snapshots: Iterable[Iterable[TransactionRecord]]) -> Iterator[AggregationResult]:
        """Ingest each snapshot of a feed in turn, yielding the summary after each."""
        for snapshot in snapshots:
            self.ingest(snapshot)
            yield self.current_summary()

    def _summarize(self, records: List[TransactionRecord]) -> AggregationResult:
        total_income = ZERO
        total_expense = ZERO
        # Keyed by display name, so same-named categories share a bucket.
        breakdown: Dict[str, Decimal] = defaultdict(lambda: ZERO)

        for record in records:
            if record.kind == TransactionType.INCOME:
                total_income += record.amount
            elif record.kind == TransactionType.EXPENSE:
                total_expense += record.amount
                breakdown[record.category_name] += record.amount

        return AggregationResult(
            total_income=total_income,
            total_expense=total_expense,
            balance=total_income - total_expense,
            category_breakdown=dict(breakdown),
            recent_transactions=records[: self._recent_limit],
        )

    def _apply_filters(self) -> List[TransactionRecord]:
        return [record for record in self._snapshot if self._filters.matches(record)]


def _as_decimal(value: Any) -> Decimal:
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return ZERO


def _as_kind(value: Any) -> TransactionType:
    if isinstance(value, TransactionType):
        return value
    try:
        return TransactionType(str(value).upper())
    except ValueError:
        return TransactionType.EXPENSE


def _as_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            return None
    return None
