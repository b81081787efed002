from typing import Dict, Type

from finance_tracker.parsers.base import RecordParser
from finance_tracker.parsers.date_schema import DayDateParser
from finance_tracker.parsers.month_schema import MonthReferenceParser

# Remote schema variants, keyed by the name used in sheetdb.json and --schema
SCHEMAS: Dict[str, Type[RecordParser]] = {
    "month": MonthReferenceParser,
    "date": DayDateParser,
}


def create_parser(schema: str) -> RecordParser:
    """
    Create the record parser for a remote schema variant.

    Raises:
        ValueError: If the schema name is unknown

    Example:
        parser = create_parser('month')
        transaction = parser.parse(record, TransactionKind.INCOME)
    """
    try:
        parser_class = SCHEMAS[schema]
    except KeyError:
        raise ValueError(
            f"Unknown schema '{schema}'. Expected one of: {', '.join(SCHEMAS)}"
        )
    return parser_class()
