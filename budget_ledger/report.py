# budget_ledger/report.py
from __future__ import annotations

from typing import Iterable, List, Optional

from budget_ledger.core.models import Transaction
from budget_ledger.summary import totals

RULE = "-" * 72
HEADER = f"{'ID':>4} | {'DATE':<10} | {'TYPE':<8} | {'CATEGORY':<16} | {'AMOUNT':>10} | NOTE"


def period_label(month: Optional[int] = None, year: Optional[int] = None) -> str:
    if year is None:
        return "All time"
    if month is None:
        return f"{year:04d}"
    return f"{month:02d}/{year:04d}"


def format_row(tx: Transaction) -> str:
    return (
        f"{tx.id:>4} | {str(tx.date):<10} | {tx.kind.value:<8} | "
        f"{tx.category[:16]:<16} | {tx.amount:>10.2f} | {tx.note or 'NA'}"
    )


def transaction_table(transactions: Iterable[Transaction]) -> List[str]:
    lines = [RULE, HEADER, RULE]
    lines.extend(format_row(tx) for tx in transactions)
    lines.append(RULE)
    return lines


def render_report(
    transactions: Iterable[Transaction],
    username: str,
    month: Optional[int] = None,
    year: Optional[int] = None,
    currency: str = "Rs.",
) -> str:
    """Render the plain-text report for the given (already filtered) entries."""
    txs = list(transactions)
    total = totals(txs)
    lines = [
        f"FINANCIAL REPORT for {username}",
        f"Period: {period_label(month, year)}",
        "",
    ]
    lines.extend(transaction_table(txs))
    lines.extend([
        f"Total Income : {currency} {total.income:.2f}",
        f"Total Expense: {currency} {total.expense:.2f}",
        f"Net Savings  : {currency} {total.net:.2f}",
        f"Transactions : {len(txs)}",
    ])
    return "\n".join(lines) + "\n"
