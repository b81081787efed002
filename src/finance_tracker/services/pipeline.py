"""
Pure transaction pipeline: merge -> sort -> filter -> summarize.

Every function takes plain sequences and returns new values; nothing here
performs I/O or keeps state between calls.
"""
import math
from datetime import date, datetime, timezone
from typing import Iterable, List, Optional, Sequence, Tuple

from finance_tracker.domain.enums import TransactionKind
from finance_tracker.domain.models import Transaction
from finance_tracker.domain.periods import current_period, normalize_selection, period_number
from finance_tracker.services.models import Summary

ALL_PERIODS = "all"


def _timestamp_key(created_at: str) -> float:
    """POSIX time of an ISO-8601 timestamp; -inf when unparseable"""
    if not created_at:
        return -math.inf
    text = created_at.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return -math.inf
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp()


def _sort_key(transaction: Transaction, group_by_period: bool) -> Tuple:
    recency = (_timestamp_key(transaction.created_at), transaction.id)
    if not group_by_period:
        return recency

    number = period_number(transaction.period)
    # Unparseable periods rank below every real month
    return (number is not None, number or 0) + recency


def merge(
    incomes: Iterable[Transaction],
    expenses: Iterable[Transaction],
) -> List[Transaction]:
    """Concatenate both collections, income first"""
    return list(incomes) + list(expenses)


def sort_transactions(
    transactions: Iterable[Transaction],
    group_by_period: bool = True,
) -> List[Transaction]:
    """
    Order transactions most relevant first.

    With grouping: period (year*100+month) descending, then creation
    timestamp descending, then id descending. Without grouping: plain
    reverse-chronological order.

    The key is total, so the result does not depend on input order.
    """
    return sorted(
        transactions,
        key=lambda t: _sort_key(t, group_by_period),
        reverse=True,
    )


def aggregate(
    incomes: Iterable[Transaction],
    expenses: Iterable[Transaction],
    group_by_period: bool = True,
) -> List[Transaction]:
    """Merge both collections into one ordered sequence"""
    return sort_transactions(merge(incomes, expenses), group_by_period)


def filter_by_period(
    transactions: Sequence[Transaction],
    selected: str,
) -> List[Transaction]:
    """
    Narrow the aggregate to a single period.

    The selection is normalized to a canonical period (bare numbers are
    left as typed), then matched exactly. ALL_PERIODS returns every
    transaction. The aggregate's order is kept.
    """
    if selected == ALL_PERIODS:
        return list(transactions)

    wanted = normalize_selection(selected)
    return [t for t in transactions if t.period == wanted]


def summarize(transactions: Iterable[Transaction]) -> Summary:
    """
    Compute income, expense and balance from scratch.

    An empty sequence gives all-zero totals. NaN amounts are skipped.
    """
    total_income = 0.0
    total_expense = 0.0
    count = 0
    invalid = 0

    for txn in transactions:
        count += 1
        if not txn.has_valid_amount:
            invalid += 1
            continue
        if txn.kind == TransactionKind.INCOME:
            total_income += txn.amount
        else:
            total_expense += txn.amount

    return Summary(
        total_income=total_income,
        total_expense=total_expense,
        count=count,
        invalid_amounts=invalid,
    )


def available_periods(transactions: Iterable[Transaction]) -> List[str]:
    """Distinct periods in order of first appearance"""
    seen = []
    for txn in transactions:
        if txn.period and txn.period not in seen:
            seen.append(txn.period)
    return seen


def default_period(
    transactions: Iterable[Transaction],
    today: Optional[date] = None,
    style: str = "month",
) -> str:
    """The current month when it has records, otherwise ALL_PERIODS"""
    this_month = current_period(today, style)
    if this_month in available_periods(transactions):
        return this_month
    return ALL_PERIODS
