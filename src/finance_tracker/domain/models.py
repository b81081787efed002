import math
import random
import string
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional
from finance_tracker.domain.enums import TransactionKind

_ALPHABET = string.digits + string.ascii_lowercase


def _to_base36(value: int) -> str:
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_ALPHABET[rem])
    return "".join(reversed(digits)) or "0"


def generate_id() -> str:
    """Client-side unique id: base-36 millisecond clock plus a random suffix"""
    suffix = "".join(random.choices(_ALPHABET, k=7))
    return _to_base36(int(time.time() * 1000)) + suffix


def utc_timestamp() -> str:
    """ISO-8601 creation timestamp, millisecond precision"""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class Transaction:
    """Core domain model representing a single income or expense record"""
    id: str
    description: str
    amount: float
    kind: TransactionKind
    period: Optional[str]
    created_at: str
    date: Optional[str] = None

    @property
    def has_valid_amount(self) -> bool:
        return not math.isnan(self.amount)

    @property
    def signed_amount(self) -> float:
        """Return amount with sign for balance calculations"""
        return self.amount if self.kind == TransactionKind.INCOME else -self.amount

    def __repr__(self):
        sign = "+" if self.kind == TransactionKind.INCOME else "-"
        return f"Transaction({self.period}, {self.description[:30]}, {sign}{self.amount:.2f})"
