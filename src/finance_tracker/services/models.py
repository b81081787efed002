"""
Service layer models - derived values handed to the rendering layer.

These models represent the results of service operations, not domain entities.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple
from finance_tracker.domain.models import Transaction

@dataclass(frozen=True)
class Summary:
    """
    Totals for a sequence of transactions.

    Records whose amount could not be parsed are left out of the totals
    and counted in `invalid_amounts`.
    """
    total_income: float = 0.0
    total_expense: float = 0.0
    count: int = 0
    invalid_amounts: int = 0

    @property
    def balance(self) -> float:
        """Net balance (income - expense)"""
        return self.total_income - self.total_expense

    def as_tuple(self) -> Tuple[float, float, float]:
        return self.total_income, self.total_expense, self.balance

@dataclass(frozen=True)
class LedgerView:
    """What the list screen shows for one period selection"""
    period: str
    transactions: Tuple[Transaction, ...]
    summary: Summary

    @property
    def is_empty(self) -> bool:
        return not self.transactions

@dataclass
class LedgerState:
    """
    The in-memory ledger for one session.

    Rebuilt in full by every load and never patched in place: a load
    assigns a new tuple of transactions and a new list of errors.
    """
    transactions: Tuple[Transaction, ...] = ()
    errors: list[str] = field(default_factory=list)
    loaded_at: Optional[datetime] = None

    @property
    def loaded(self) -> bool:
        return self.loaded_at is not None

    def find(self, transaction_id: str) -> Optional[Transaction]:
        """Look up a loaded transaction by id"""
        for txn in self.transactions:
            if txn.id == transaction_id:
                return txn
        return None
