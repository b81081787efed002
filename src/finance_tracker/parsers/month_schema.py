from typing import Any, Dict, Optional
from finance_tracker.domain.models import Transaction
from finance_tracker.domain.periods import normalize_period, parse_period
from finance_tracker.parsers.base import RecordParser

class MonthReferenceParser(RecordParser):
    """
    Schema for sheets holding a month reference column.

    The `mesReferencia` cell may come back as "6/2025", "06/2025" or as a
    spreadsheet serial date when the sheet auto-formatted it.
    """

    PERIOD_FIELD = "mesReferencia"

    period_style = "month"
    groups_by_period = True

    def read_period(self, record: Dict[str, Any]) -> tuple[Optional[str], Optional[str]]:
        return normalize_period(record.get(self.PERIOD_FIELD)), None

    def write_period(self, transaction: Transaction) -> Dict[str, Any]:
        return {self.PERIOD_FIELD: transaction.period}

    def normalize_input(self, value: str) -> tuple[str, Optional[str]]:
        period = normalize_period(value)
        if parse_period(period) is None or "/" not in str(period):
            raise ValueError(f"Invalid month reference '{value}', expected MM/YYYY")
        return period, None
