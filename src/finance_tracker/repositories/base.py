from abc import ABC, abstractmethod
from typing import List, Optional

from finance_tracker.domain.models import Transaction
from finance_tracker.domain.enums import TransactionKind

class RemoteCollectionError(Exception):
    """Raised when a remote collection request fails (HTTP status or network)."""

    def __init__(
        self,
        kind: TransactionKind,
        operation: str,
        detail: str,
        status: Optional[int] = None,
    ):
        self.kind = kind
        self.operation = operation
        self.status = status
        status_text = f" ({status})" if status is not None else ""
        super().__init__(f"Failed to {operation} {kind.value} records{status_text}: {detail}")

class TransactionNotFoundError(Exception):
    """Raised when a transaction cannot be found."""
    pass

class InvalidTransactionError(ValueError):
    """Raised when user input cannot become a valid transaction."""
    pass

class TransactionRepository(ABC):
    """
    Abstract repository for the two remote transaction collections.

    Income and expense records are stored as physically separate
    collections, so every operation is addressed by kind.
    """

    @abstractmethod
    def get_all(self, kind: TransactionKind) -> List[Transaction]:
        """
        Retrieve every record of one collection.

        Args:
            kind: Collection to read

        Returns:
            List of normalized transactions, in remote order

        Raises:
            RemoteCollectionError: If the collection cannot be fetched
        """
        pass

    @abstractmethod
    def save(self, transaction: Transaction) -> Transaction:
        """
        Append a transaction to the collection of its kind.

        Raises:
            RemoteCollectionError: If the write fails
        """
        pass

    @abstractmethod
    def update(self, transaction: Transaction) -> Transaction:
        """
        Replace a record's fields in place (full record).

        Raises:
            TransactionNotFoundError: If no record has this id
            RemoteCollectionError: If the write fails
        """
        pass

    @abstractmethod
    def delete(self, transaction_id: str, kind: TransactionKind) -> bool:
        """
        Delete a record by id from the collection of a kind.

        Returns:
            True if deleted, False if not found

        Raises:
            RemoteCollectionError: If the write fails
        """
        pass
