# budget_ledger/summary.py
"""Aggregations over a user's transactions.

Every function takes any iterable of :class:`Transaction` (a
:class:`RecordStore` works) and returns plain values, so summaries can be
computed over a filtered subset as easily as over the whole ledger.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Dict, Iterable, List, Tuple

from budget_ledger.core.models import Kind, Transaction

ZERO = Decimal("0")


@dataclass
class PeriodSummary:
    income: Decimal = ZERO
    expense: Decimal = ZERO

    @property
    def net(self) -> Decimal:
        return self.income - self.expense

    @property
    def has_data(self) -> bool:
        return bool(self.income or self.expense)


@dataclass
class YearSummary(PeriodSummary):
    year: int = 0
    months_with_data: int = 0
    by_month: Dict[int, PeriodSummary] = field(default_factory=dict)


class Health(str, Enum):
    DANGER = "Danger"
    RISK = "Risk"
    CAUTION = "Caution"
    HEALTHY = "Healthy"

    @property
    def message(self) -> str:
        return _HEALTH_TIPS[self]


_HEALTH_TIPS = {
    Health.DANGER: "Reduce discretionary spending, prioritize essential bills.",
    Health.RISK: "Cut shopping/dining, track subscriptions.",
    Health.CAUTION: "Review recurring expenses.",
    Health.HEALTHY: "Maintain savings and consider goals.",
}


@dataclass
class HealthReport:
    health: Health
    ratio: Decimal

    @property
    def message(self) -> str:
        return self.health.message


@dataclass
class MonthlyHealth:
    month: int
    year: int
    summary: PeriodSummary
    report: HealthReport
    top_categories: List[Tuple[str, Decimal]]


def _in_period(tx: Transaction, month: int | None, year: int) -> bool:
    if tx.date.year != year:
        return False
    return month is None or tx.date.month == month


def sum_by_kind_and_period(
    transactions: Iterable[Transaction], kind: Kind, month: int, year: int
) -> Decimal:
    return sum(
        (tx.amount for tx in transactions if tx.kind is kind and _in_period(tx, month, year)),
        ZERO,
    )


def totals(transactions: Iterable[Transaction]) -> PeriodSummary:
    """Income and expense over every transaction given."""
    summary = PeriodSummary()
    for tx in transactions:
        if tx.kind is Kind.INCOME:
            summary.income += tx.amount
        else:
            summary.expense += tx.amount
    return summary


def monthly_summary(transactions: Iterable[Transaction], month: int, year: int) -> PeriodSummary:
    return totals(tx for tx in transactions if _in_period(tx, month, year))


def yearly_summary(transactions: Iterable[Transaction], year: int) -> YearSummary:
    """Aggregate a year month by month.

    ``months_with_data`` counts the months that hold at least one
    transaction; callers use it to flag incomplete years.
    """
    by_month = {m: PeriodSummary() for m in range(1, 13)}
    seen = set()
    for tx in transactions:
        if tx.date.year != year or not 1 <= tx.date.month <= 12:
            continue
        seen.add(tx.date.month)
        bucket = by_month[tx.date.month]
        if tx.kind is Kind.INCOME:
            bucket.income += tx.amount
        else:
            bucket.expense += tx.amount

    return YearSummary(
        income=sum((s.income for s in by_month.values()), ZERO),
        expense=sum((s.expense for s in by_month.values()), ZERO),
        year=year,
        months_with_data=len(seen),
        by_month=by_month,
    )


def top_expense_categories(
    transactions: Iterable[Transaction], month: int, year: int, limit: int = 3
) -> List[Tuple[str, Decimal]]:
    """Rank expense categories of a month by total, largest first.

    Equal totals keep the order in which the categories first appeared.
    """
    totals_by_cat: Dict[str, Decimal] = {}
    for tx in transactions:
        if tx.kind is not Kind.EXPENSE or not _in_period(tx, month, year):
            continue
        totals_by_cat[tx.category] = totals_by_cat.get(tx.category, ZERO) + tx.amount

    ranked = sorted(totals_by_cat.items(), key=lambda item: item[1], reverse=True)
    if limit is None:
        return ranked
    return ranked[:max(limit, 0)]


def health_classification(income, expense) -> HealthReport:
    income = Decimal(str(income))
    expense = Decimal(str(expense))
    ratio = (expense / income * 100) if income > 0 else ZERO
    if expense > income:
        return HealthReport(Health.DANGER, ratio)
    if ratio > 80:
        return HealthReport(Health.RISK, ratio)
    if ratio > 50:
        return HealthReport(Health.CAUTION, ratio)
    return HealthReport(Health.HEALTHY, ratio)


def financial_health(
    transactions: Iterable[Transaction], month: int, year: int, limit: int = 3
) -> MonthlyHealth:
    txs = list(transactions)
    summary = monthly_summary(txs, month, year)
    return MonthlyHealth(
        month=month,
        year=year,
        summary=summary,
        report=health_classification(summary.income, summary.expense),
        top_categories=top_expense_categories(txs, month, year, limit),
    )


def filter_by_period(transactions: Iterable[Transaction], month: int | None = None,
                     year: int | None = None) -> List[Transaction]:
    """Return transactions in the given month/year; ``None`` matches anything."""
    return [
        tx for tx in transactions
        if (year is None or tx.date.year == year)
        and (month is None or tx.date.month == month)
    ]
