from typing import Any, List

import requests

from finance_tracker.domain.enums import TransactionKind
from finance_tracker.domain.models import Transaction
from finance_tracker.logging_setup import get_logger
from finance_tracker.parsers.base import RecordParser
from finance_tracker.remote.connection import SessionManager
from finance_tracker.repositories.base import (
    RemoteCollectionError,
    TransactionNotFoundError,
    TransactionRepository,
)

logger = get_logger(__name__)

class SheetDBTransactionRepository(TransactionRepository):
    """
    SheetDB implementation of the TransactionRepository.

    Each kind lives in its own sheet. Records are flat JSON objects and
    every write sends the full record.
    """

    def __init__(self, session_manager: SessionManager, parser: RecordParser):
        self.http = session_manager
        self.config = session_manager.config
        self.parser = parser

    def get_all(self, kind: TransactionKind) -> List[Transaction]:
        """Fetch and normalize every record of a collection."""
        url = self.config.collection_url(kind)
        payload = self._send(kind, "fetch", "GET", url)

        if not isinstance(payload, list):
            raise RemoteCollectionError(kind, "fetch", f"expected a list, got {type(payload).__name__}")

        for record in payload:
            if not isinstance(record, dict):
                raise RemoteCollectionError(kind, "fetch", f"expected records, got {type(record).__name__}")

        logger.debug("Fetched %d raw %s records", len(payload), kind.value)
        return [self.parser.parse(record, kind) for record in payload]

    def save(self, transaction: Transaction) -> Transaction:
        """Append a transaction to its sheet."""
        url = self.config.collection_url(transaction.kind)
        self._send(
            transaction.kind, "create", "POST", url,
            json=self.parser.to_record(transaction),
        )
        logger.info("Created %s transaction %s", transaction.kind.value, transaction.id)
        return transaction

    def update(self, transaction: Transaction) -> Transaction:
        """Replace an existing record with the transaction's fields."""
        url, params = self.config.record_address(transaction.kind, transaction.id)
        result = self._send(
            transaction.kind, "update", "PUT", url,
            params=params,
            json=self.parser.to_record(transaction),
        )

        if isinstance(result, dict) and result.get("updated") == 0:
            raise TransactionNotFoundError(
                f"Transaction with ID {transaction.id} not found"
            )

        logger.info("Updated %s transaction %s", transaction.kind.value, transaction.id)
        return transaction

    def delete(self, transaction_id: str, kind: TransactionKind) -> bool:
        """Delete a record by id."""
        url, params = self.config.record_address(kind, transaction_id)
        result = self._send(kind, "delete", "DELETE", url, params=params)

        deleted = result.get("deleted", 1) if isinstance(result, dict) else 1
        logger.info("Deleted %s transaction %s (%s rows)", kind.value, transaction_id, deleted)
        return deleted > 0

    def _send(
        self,
        kind: TransactionKind,
        operation: str,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> Any:
        """
        Send one request and decode its JSON body.

        Raises:
            RemoteCollectionError: On network errors, non-2xx statuses or
                bodies that are not JSON
        """
        try:
            with self.http.request(method, url, **kwargs) as response:
                if not response.ok:
                    raise RemoteCollectionError(
                        kind, operation, response.text, status=response.status_code
                    )
                return response.json()
        except requests.RequestException as e:
            raise RemoteCollectionError(kind, operation, str(e)) from e
        except ValueError as e:
            raise RemoteCollectionError(kind, operation, f"invalid JSON response: {e}") from e
