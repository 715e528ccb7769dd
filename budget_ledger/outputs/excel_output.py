# budget_ledger/outputs/excel_output.py

"""Excel output module backed by XlsxWriter.

The workbook has a ``Transactions`` worksheet with every exported entry, a
``Summary`` worksheet with income, expense and net per month plus a grand
total, and a ``Categories`` worksheet ranking expense categories with a pie
chart.
"""

from __future__ import annotations

from pathlib import Path

import xlsxwriter

from budget_ledger.core.models import Kind
from budget_ledger.outputs.base import BaseOutput
from budget_ledger.summary import ZERO


class ExcelOutput(BaseOutput):
    """Generate a local Excel workbook with monthly and category summaries."""

    extension = "xlsx"
    TRANSACTIONS = "Transactions"
    SUMMARY = "Summary"
    CATEGORIES = "Categories"

    def export(self, transactions, username, path, month=None, year=None):
        txs = list(transactions)
        out_path = Path(path)
        out_path.parent.mkdir(parents=True, exist_ok=True)

        workbook = xlsxwriter.Workbook(str(out_path))
        amount_fmt = workbook.add_format({"num_format": "#,##0.00"})
        bold = workbook.add_format({"bold": True})

        tx_ws = workbook.add_worksheet(self.TRANSACTIONS)
        tx_ws.freeze_panes(1, 0)
        headers = ["id", "date", "type", "category", "amount", "note"]
        tx_ws.write_row(0, 0, headers)
        for idx, tx in enumerate(txs, start=1):
            tx_ws.write_row(idx, 0, [tx.id, str(tx.date), tx.kind.value, tx.category])
            tx_ws.write_number(idx, 4, float(tx.amount), amount_fmt)
            tx_ws.write(idx, 5, tx.note)
        tx_ws.add_table(0, 0, max(len(txs), 1), 5, {
            "columns": [{"header": h} for h in headers]
        })

        summary_ws = workbook.add_worksheet(self.SUMMARY)
        summary_ws.freeze_panes(1, 0)
        summary_ws.set_column(1, 3, None, amount_fmt)
        rows = self._build_summary_rows(txs)
        for offset, row in enumerate(rows):
            fmt = bold if offset == 0 or offset == len(rows) - 1 else None
            summary_ws.write_row(offset, 0, row, fmt)

        cat_ws = workbook.add_worksheet(self.CATEGORIES)
        cat_ws.set_column(1, 1, None, amount_fmt)
        cat_rows = self._build_category_rows(txs)
        for offset, row in enumerate(cat_rows):
            cat_ws.write_row(offset, 0, row)
        if len(cat_rows) > 1:
            chart = workbook.add_chart({"type": "pie"})
            chart.add_series({
                "categories": [cat_ws.name, 1, 0, len(cat_rows) - 1, 0],
                "values": [cat_ws.name, 1, 1, len(cat_rows) - 1, 1],
                "name": "Spending by category",
            })
            chart.set_title({"name": "Spending by category"})
            chart.set_legend({"position": "right"})
            cat_ws.insert_chart(0, 3, chart)

        workbook.close()
        return out_path

    def _build_summary_rows(self, transactions):
        months = {}
        for tx in transactions:
            key = (tx.date.year, tx.date.month)
            income, expense = months.get(key, (ZERO, ZERO))
            if tx.kind is Kind.INCOME:
                income += tx.amount
            else:
                expense += tx.amount
            months[key] = (income, expense)

        rows = [["Month", "Income", "Expense", "Net"]]
        total_income = total_expense = ZERO
        for year, month in sorted(months):
            income, expense = months[(year, month)]
            rows.append([f"{month:02d}/{year:04d}", float(income), float(expense),
                         float(income - expense)])
            total_income += income
            total_expense += expense
        rows.append(["Total", float(total_income), float(total_expense),
                     float(total_income - total_expense)])
        return rows

    def _build_category_rows(self, transactions):
        category_totals = {}
        for tx in transactions:
            if tx.kind is not Kind.EXPENSE:
                continue
            category_totals[tx.category] = category_totals.get(tx.category, ZERO) + tx.amount
        return [["Category", "Total"]] + [
            [category, float(total)]
            for category, total in sorted(category_totals.items(), key=lambda item: item[1], reverse=True)
        ]
