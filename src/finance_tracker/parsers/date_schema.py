from datetime import date as Date
from typing import Any, Dict, Optional
from finance_tracker.domain.models import Transaction
from finance_tracker.domain.periods import month_of_day
from finance_tracker.parsers.base import RecordParser

class DayDateParser(RecordParser):
    """
    Schema for sheets holding an ISO day column (`data`, "YYYY-MM-DD").

    The day is kept verbatim and its month ("YYYY-MM") is used as the
    period. The list is ordered by recency only.
    """

    DATE_FIELD = "data"

    period_style = "date"
    groups_by_period = False

    def read_period(self, record: Dict[str, Any]) -> tuple[Optional[str], Optional[str]]:
        day = record.get(self.DATE_FIELD)
        if day is None:
            return None, None
        day = str(day)
        return month_of_day(day), day

    def write_period(self, transaction: Transaction) -> Dict[str, Any]:
        return {self.DATE_FIELD: transaction.date}

    def normalize_input(self, value: str) -> tuple[str, Optional[str]]:
        try:
            day = Date.fromisoformat(str(value).strip())
        except ValueError:
            raise ValueError(f"Invalid date '{value}', expected YYYY-MM-DD")
        iso = day.isoformat()
        return month_of_day(iso), iso
