# budget_ledger/core/models.py
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from budget_ledger.dates import LedgerDate


class Kind(str, Enum):
    INCOME = "Income"
    EXPENSE = "Expense"

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        for kind in cls:
            if kind.value.lower() == text:
                return kind
        raise ValueError(f"Unknown transaction kind '{value}'")


class Advisory(str, Enum):
    """Non-blocking warnings returned alongside a successful add."""
    OVERSPEND = "overspend"
    BUDGET_EXCEEDED = "budget_exceeded"


@dataclass
class Transaction:
    id: int
    kind: Kind
    category: str
    amount: Decimal
    date: LedgerDate
    note: str = ""

    @property
    def period(self):
        return self.date.period


@dataclass
class AddResult:
    transaction: Transaction
    advisories: list
