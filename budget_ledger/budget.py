# budget_ledger/budget.py
from __future__ import annotations

from decimal import Decimal
from enum import Enum

from budget_ledger.core.errors import ValidationError
from budget_ledger.core.models import Kind
from budget_ledger.store import quantize_cents
from budget_ledger.summary import sum_by_kind_and_period

APPROACHING_SHARE = Decimal("0.8")


class BudgetStatus(str, Enum):
    DISABLED = "disabled"
    WITHIN = "within"
    APPROACHING = "approaching"
    EXCEEDED = "exceeded"


def classify(expense_total, limit) -> BudgetStatus:
    """Classify a monthly expense total against a limit (0 disables)."""
    limit = Decimal(str(limit or 0))
    expense_total = Decimal(str(expense_total or 0))
    if limit == 0:
        return BudgetStatus.DISABLED
    if expense_total > limit:
        return BudgetStatus.EXCEEDED
    if expense_total == limit:
        # spending the whole budget is not over it
        return BudgetStatus.WITHIN
    if expense_total > limit * APPROACHING_SHARE:
        return BudgetStatus.APPROACHING
    return BudgetStatus.WITHIN


class BudgetPolicy:
    """The single monthly spending limit of a user."""

    def __init__(self, limit=0):
        self._limit = Decimal("0")
        self.set(limit)

    @property
    def limit(self) -> Decimal:
        return self._limit

    @property
    def enabled(self) -> bool:
        return self._limit > 0

    def set(self, limit) -> Decimal:
        value = quantize_cents(str(limit if limit is not None else 0).strip() or "0")
        if value is None:
            raise ValidationError(f"Invalid budget limit '{limit}'")
        if value < 0:
            raise ValidationError("Budget limit must be zero or a positive number")
        self._limit = value
        return self._limit

    def classify(self, expense_total) -> BudgetStatus:
        return classify(expense_total, self._limit)

    def status_for(self, transactions, month: int, year: int) -> BudgetStatus:
        spent = sum_by_kind_and_period(transactions, Kind.EXPENSE, month, year)
        return self.classify(spent)
