# budget_ledger/store.py
"""In-memory record store for one user's transactions."""
from __future__ import annotations

import logging
from dataclasses import replace
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable, List, Optional

from budget_ledger import dates
from budget_ledger.core.errors import (
    DuplicateSalaryError,
    NoIncomeError,
    NotFoundError,
    ValidationError,
)
from budget_ledger.core.models import AddResult, Advisory, Kind, Transaction

logger = logging.getLogger(__name__)

SALARY = "Salary"
CENTS = Decimal("0.01")
_EDITABLE = ("kind", "category", "amount", "date", "note")


def quantize_cents(value) -> Optional[Decimal]:
    """Round a numeric value to cents, or ``None`` if it is not a finite
    number that fits the decimal context."""
    try:
        amount = Decimal(str(value).strip())
        if not amount.is_finite():
            return None
        return amount.quantize(CENTS, rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError):
        return None


def to_amount(value) -> Decimal:
    """Convert user input to a positive amount rounded to cents."""
    amount = quantize_cents(value)
    if amount is None:
        raise ValidationError(f"Invalid amount '{value}'")
    if amount <= 0:
        raise ValidationError("Amount must be greater than zero")
    return amount


def _clean_category(category) -> str:
    text = str(category or "").strip()
    if not text:
        raise ValidationError("Category must not be empty")
    return text


def _to_kind(value) -> Kind:
    try:
        return Kind.parse(value)
    except ValueError as e:
        raise ValidationError(str(e)) from None


class RecordStore:
    """Ordered transactions for a single session.

    Ids are issued from a running high-water mark, so an id is never handed
    out twice even after the newest transaction is deleted. ``strict`` turns
    on the income-before-expense rule and the overspend advisory.
    """

    def __init__(self, transactions: Iterable[Transaction] = (), strict: bool = True):
        self.strict = strict
        self._items: List[Transaction] = []
        self._last_id = 0
        for tx in transactions:
            self._append(tx)

    def _append(self, tx: Transaction) -> None:
        self._items.append(tx)
        self._last_id = max(self._last_id, tx.id)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(list(self._items))

    def all(self) -> List[Transaction]:
        return list(self._items)

    def next_id(self) -> int:
        return self._last_id + 1

    def find_by_id(self, txn_id: int) -> Optional[Transaction]:
        for tx in self._items:
            if tx.id == txn_id:
                return tx
        return None

    def _period_total(self, kind: Kind, month: int, year: int) -> Decimal:
        return sum(
            (tx.amount for tx in self._items
             if tx.kind is kind and tx.date.month == month and tx.date.year == year),
            Decimal("0"),
        )

    def has_salary(self, month: int, year: int) -> bool:
        return any(
            tx.kind is Kind.INCOME and tx.category == SALARY and tx.period == (month, year)
            for tx in self._items
        )

    def check(self, kind, category, amount, date=None, budget_limit=0) -> list:
        """Validate a prospective entry and return its advisories.

        Raises the same errors as :meth:`add`; never mutates the store.
        """
        kind = _to_kind(kind)
        category = _clean_category(category)
        amount = to_amount(amount)
        when = dates.coerce(date)
        return self._rules(kind, category, amount, when, budget_limit)

    def _rules(self, kind, category, amount, when, budget_limit) -> list:
        month, year = when.period
        if kind is Kind.INCOME:
            if category == SALARY and self.has_salary(month, year):
                raise DuplicateSalaryError(month, year)
            return []

        advisories = []
        income = self._period_total(Kind.INCOME, month, year)
        expense = self._period_total(Kind.EXPENSE, month, year) + amount
        if self.strict:
            if income == 0:
                raise NoIncomeError(month, year)
            if expense > income:
                advisories.append(Advisory.OVERSPEND)
        limit = Decimal(str(budget_limit or 0))
        if limit > 0 and expense > limit:
            advisories.append(Advisory.BUDGET_EXCEEDED)
        return advisories

    def add(self, kind, category, amount, date=None, note="", budget_limit=0) -> AddResult:
        kind = _to_kind(kind)
        category = _clean_category(category)
        amount = to_amount(amount)
        when = dates.coerce(date)
        advisories = self._rules(kind, category, amount, when, budget_limit)

        tx = Transaction(
            id=self.next_id(),
            kind=kind,
            category=category,
            amount=amount,
            date=when,
            note=(note or "").strip(),
        )
        self._append(tx)
        logger.debug("Added transaction %s (%s %s)", tx.id, kind.value, amount)
        return AddResult(tx, advisories)

    def edit(self, txn_id: int, **updates) -> Transaction:
        """Apply a partial update to one transaction.

        Fields not supplied keep their value. An invalid date is dropped and
        the other fields are still applied.
        """
        unknown = set(updates) - set(_EDITABLE)
        if unknown:
            raise ValidationError(f"Cannot edit field(s): {', '.join(sorted(unknown))}")

        for idx, tx in enumerate(self._items):
            if tx.id == txn_id:
                break
        else:
            raise NotFoundError(txn_id)

        changes = {}
        if updates.get("kind") is not None:
            changes["kind"] = _to_kind(updates["kind"])
        if updates.get("category") is not None:
            changes["category"] = _clean_category(updates["category"])
        if updates.get("amount") is not None:
            changes["amount"] = to_amount(updates["amount"])
        if updates.get("note") is not None:
            changes["note"] = str(updates["note"]).strip()
        if updates.get("date") is not None:
            try:
                changes["date"] = dates.coerce(updates["date"])
            except ValidationError as e:
                logger.warning("Ignoring date update for transaction %s: %s", txn_id, e)

        updated = replace(tx, **changes)
        self._items[idx] = updated
        return updated

    def delete(self, txn_id: int) -> bool:
        for idx, tx in enumerate(self._items):
            if tx.id == txn_id:
                del self._items[idx]
                return True
        return False
