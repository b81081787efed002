import pytest
from typing import Any, Dict, List, Optional

from finance_tracker.domain.enums import TransactionKind
from finance_tracker.domain.models import Transaction
from finance_tracker.parsers.base import RecordParser
from finance_tracker.parsers.date_schema import DayDateParser
from finance_tracker.parsers.month_schema import MonthReferenceParser
from finance_tracker.repositories.base import (
    RemoteCollectionError,
    TransactionNotFoundError,
    TransactionRepository,
)

class InMemoryTransactionRepository(TransactionRepository):
    """
    Stand-in for the remote sheets.

    Rows are kept as raw records, so every read goes through the parser
    exactly like a real fetch does.
    """

    def __init__(self, parser: RecordParser):
        self.parser = parser
        self.sheets: Dict[TransactionKind, List[Dict[str, Any]]] = {
            kind: [] for kind in TransactionKind
        }
        self.failing_kinds: set = set()
        self.fetch_count = 0

    def get_all(self, kind: TransactionKind) -> List[Transaction]:
        self.fetch_count += 1
        if kind in self.failing_kinds:
            raise RemoteCollectionError(kind, "fetch", "Service Unavailable", status=503)
        return [self.parser.parse(dict(row), kind) for row in self.sheets[kind]]

    def save(self, transaction: Transaction) -> Transaction:
        self.sheets[transaction.kind].append(self.parser.to_record(transaction))
        return transaction

    def update(self, transaction: Transaction) -> Transaction:
        rows = self.sheets[transaction.kind]
        for i, row in enumerate(rows):
            if row["id"] == transaction.id:
                rows[i] = self.parser.to_record(transaction)
                return transaction
        raise TransactionNotFoundError(f"Transaction with ID {transaction.id} not found")

    def delete(self, transaction_id: str, kind: TransactionKind) -> bool:
        rows = self.sheets[kind]
        remaining = [row for row in rows if row["id"] != transaction_id]
        self.sheets[kind] = remaining
        return len(remaining) < len(rows)

@pytest.fixture
def month_parser() -> MonthReferenceParser:
    return MonthReferenceParser()

@pytest.fixture
def date_parser() -> DayDateParser:
    return DayDateParser()

@pytest.fixture
def memory_repository(month_parser) -> InMemoryTransactionRepository:
    """Empty in-memory sheets using the month schema"""
    return InMemoryTransactionRepository(month_parser)

@pytest.fixture
def make_transaction():
    """Build transactions with sensible defaults"""
    def _make(
        id: str = "t1",
        description: str = "Item",
        amount: float = 10.0,
        kind: TransactionKind = TransactionKind.EXPENSE,
        period: Optional[str] = "06/2025",
        created_at: str = "2025-06-01T12:00:00.000Z",
        date: Optional[str] = None,
    ) -> Transaction:
        return Transaction(
            id=id,
            description=description,
            amount=amount,
            kind=kind,
            period=period,
            created_at=created_at,
            date=date,
        )
    return _make

@pytest.fixture
def date_memory_repository(date_parser) -> InMemoryTransactionRepository:
    """Empty in-memory sheets using the date schema"""
    return InMemoryTransactionRepository(date_parser)
