import math
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from finance_tracker.domain.enums import TransactionKind
from finance_tracker.domain.models import Transaction

# Remote column names shared by every schema
ID_FIELD = "id"
DESCRIPTION_FIELD = "descricao"
TIMESTAMP_FIELD = "timestamp"

# The amount lives in a different column for each collection
AMOUNT_FIELDS = {
    TransactionKind.INCOME: "valorEntrada",
    TransactionKind.EXPENSE: "valorSaida",
}


def parse_amount(value: Any) -> float:
    """
    Parse a remote amount cell as a float.

    A decimal comma is accepted ("12,50"). Missing or non-numeric
    values yield NaN so the record can still be built.
    """
    if value is None or isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).strip().replace(",", "."))
    except ValueError:
        return math.nan


class RecordParser(ABC):
    """
    Abstract base class for remote record schemas.

    Each schema variant maps a flat sheet row to a Transaction and back.
    This implements the Strategy pattern - the active deployment picks
    one concrete parser by name through create_parser.
    """

    # "month" -> periods rendered as MM/YYYY, "date" -> YYYY-MM
    period_style = "month"

    # Whether the aggregate is grouped by period before recency
    groups_by_period = True

    def parse(self, record: Dict[str, Any], kind: TransactionKind) -> Transaction:
        """
        Parse one raw remote record into a Transaction.

        Args:
            record: Flat record object as returned by the remote collection
            kind: Collection the record was fetched from

        Returns:
            Transaction, with NaN amount or raw period when unparseable
        """
        period, day = self.read_period(record)
        return Transaction(
            id=str(record.get(ID_FIELD, "")),
            description=str(record.get(DESCRIPTION_FIELD) or ""),
            amount=parse_amount(record.get(AMOUNT_FIELDS[kind])),
            kind=kind,
            period=period,
            created_at=str(record.get(TIMESTAMP_FIELD) or ""),
            date=day,
        )

    def to_record(self, transaction: Transaction) -> Dict[str, Any]:
        """Serialize a Transaction to the full remote record shape"""
        record = {
            DESCRIPTION_FIELD: transaction.description,
            TIMESTAMP_FIELD: transaction.created_at,
            ID_FIELD: transaction.id,
            AMOUNT_FIELDS[transaction.kind]: transaction.amount,
        }
        record.update(self.write_period(transaction))
        return record

    @abstractmethod
    def read_period(self, record: Dict[str, Any]) -> tuple[Optional[str], Optional[str]]:
        """
        Read the period (and ISO day, where the schema has one) of a record.

        Returns:
            (period, date) tuple
        """
        pass

    @abstractmethod
    def write_period(self, transaction: Transaction) -> Dict[str, Any]:
        """Return the period column(s) for a remote record"""
        pass

    @abstractmethod
    def normalize_input(self, value: str) -> tuple[str, Optional[str]]:
        """
        Normalize a user-supplied period for a new or edited transaction.

        Returns:
            (period, date) tuple

        Raises:
            ValueError: If the value is not a valid period for this schema
        """
        pass
