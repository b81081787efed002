import math
from dataclasses import replace
from datetime import date, datetime
from typing import List, Optional

from finance_tracker.domain.enums import TransactionKind
from finance_tracker.domain.models import Transaction, generate_id, utc_timestamp
from finance_tracker.domain.periods import current_period
from finance_tracker.logging_setup import get_logger
from finance_tracker.parsers.base import RecordParser
from finance_tracker.repositories.base import (
    InvalidTransactionError,
    RemoteCollectionError,
    TransactionNotFoundError,
    TransactionRepository,
)
from finance_tracker.services import pipeline
from finance_tracker.services.models import LedgerState, LedgerView

logger = get_logger(__name__)

class TransactionService:
    """
    Coordinates loads and writes against the two remote collections.

    Owns the LedgerState. Every successful write is followed by a full
    reload; a failed write raises and leaves the state untouched.
    """

    def __init__(self, repository: TransactionRepository, parser: RecordParser):
        self.repository = repository
        self.parser = parser
        self.state = LedgerState()

    def load(self) -> LedgerState:
        """
        Fetch both collections and rebuild the ledger.

        Income and expense are fetched one after the other. A failing
        collection degrades to empty and its error is kept in
        `state.errors`; the other one is still loaded.

        Returns:
            The new LedgerState
        """
        errors: List[str] = []
        collections = {}

        for kind in TransactionKind:
            try:
                collections[kind] = self.repository.get_all(kind)
            except RemoteCollectionError as e:
                logger.error("%s", e)
                errors.append(str(e))
                collections[kind] = []

        transactions = pipeline.aggregate(
            collections[TransactionKind.INCOME],
            collections[TransactionKind.EXPENSE],
            group_by_period=self.parser.groups_by_period,
        )

        self.state = LedgerState(
            transactions=tuple(transactions),
            errors=errors,
            loaded_at=datetime.now(),
        )
        logger.debug("Loaded %d transactions", len(transactions))
        return self.state

    def view(self, period: Optional[str] = None) -> LedgerView:
        """
        Derive what to show for a period selection.

        Args:
            period: "MM/YYYY" / "YYYY-MM", "all", or None for the default
                (current month when it has records, else all)
        """
        transactions = self.state.transactions
        if period is None:
            period = pipeline.default_period(
                transactions, style=self.parser.period_style
            )

        subset = pipeline.filter_by_period(transactions, period)
        return LedgerView(
            period=period,
            transactions=tuple(subset),
            summary=pipeline.summarize(subset),
        )

    def available_periods(self) -> List[str]:
        return pipeline.available_periods(self.state.transactions)

    def create(
        self,
        description: str,
        amount: float,
        kind: TransactionKind,
        period: Optional[str] = None,
    ) -> Transaction:
        """
        Create a transaction remotely, then reload.

        Args:
            description: Free-text label
            amount: Non-negative magnitude
            kind: INCOME or EXPENSE
            period: Month reference (or ISO day for the date schema).
                Defaults to today.

        Raises:
            InvalidTransactionError: If the input is rejected
            RemoteCollectionError: If the write fails (no reload happens)
        """
        if period is None:
            period = date.today().isoformat() if self.parser.period_style == "date" \
                else current_period()

        canonical, day = self._validate_period(period)
        transaction = Transaction(
            id=generate_id(),
            description=self._validate_description(description),
            amount=self._validate_amount(amount),
            kind=kind,
            period=canonical,
            created_at=utc_timestamp(),
            date=day,
        )

        self.repository.save(transaction)
        self.load()
        return transaction

    def delete(self, transaction_id: str, kind: TransactionKind) -> bool:
        """
        Delete a transaction remotely, then reload.

        Raises:
            RemoteCollectionError: If the write fails (no reload happens)
        """
        deleted = self.repository.delete(transaction_id, kind)
        if not deleted:
            logger.warning("No %s transaction with id %s", kind.value, transaction_id)
        self.load()
        return deleted

    def update(
        self,
        transaction_id: str,
        kind: TransactionKind,
        description: Optional[str] = None,
        amount: Optional[float] = None,
        new_kind: Optional[TransactionKind] = None,
        period: Optional[str] = None,
    ) -> Transaction:
        """
        Edit a transaction, then reload.

        The two kinds live in separate collections, so changing the kind
        deletes the record from its original collection and appends it
        to the other one.

        Raises:
            TransactionNotFoundError: If the id is not in the loaded ledger
            InvalidTransactionError: If the new values are rejected
            RemoteCollectionError: If a write fails (no reload happens)
        """
        if not self.state.loaded:
            self.load()

        current = self.state.find(transaction_id)
        if current is None or current.kind != kind:
            raise TransactionNotFoundError(
                f"No {kind.value} transaction with ID {transaction_id}"
            )

        changes = {}
        if description is not None:
            changes["description"] = self._validate_description(description)
        if amount is not None:
            changes["amount"] = self._validate_amount(amount)
        if new_kind is not None:
            changes["kind"] = new_kind
        if period is not None:
            changes["period"], changes["date"] = self._validate_period(period)

        updated = replace(current, **changes)

        if updated.kind == current.kind:
            self.repository.update(updated)
        else:
            logger.info(
                "Moving transaction %s from %s to %s",
                transaction_id, current.kind.value, updated.kind.value,
            )
            self.repository.delete(current.id, current.kind)
            self.repository.save(updated)

        self.load()
        return updated

    def _validate_description(self, description: str) -> str:
        description = (description or "").strip()
        if not description:
            raise InvalidTransactionError("Description cannot be empty")
        return description

    def _validate_amount(self, amount) -> float:
        try:
            value = float(amount)
        except (TypeError, ValueError):
            raise InvalidTransactionError(f"Amount must be a number, got '{amount}'")
        if math.isnan(value) or math.isinf(value):
            raise InvalidTransactionError(f"Amount must be a finite number, got '{amount}'")
        if value <= 0:
            raise InvalidTransactionError(f"Amount must be greater than zero, got {value}")
        return value

    def _validate_period(self, period: str) -> tuple[str, Optional[str]]:
        try:
            return self.parser.normalize_input(period)
        except ValueError as e:
            raise InvalidTransactionError(str(e))
