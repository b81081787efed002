from enum import Enum

class TransactionKind(Enum):
    """Represents whether money is coming in or out"""
    INCOME = "income" # in
    EXPENSE = "expense" # out
