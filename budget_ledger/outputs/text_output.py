# budget_ledger/outputs/text_output.py

from pathlib import Path

from budget_ledger.outputs.base import BaseOutput
from budget_ledger.report import render_report


class TextOutput(BaseOutput):
    """Plain-text report: header, fixed-width rows, totals."""
    extension = "txt"

    def export(self, transactions, username, path, month=None, year=None):
        text = render_report(transactions, username, month=month, year=year,
                             currency=self.currency)
        out_path = Path(path)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(text, encoding="utf-8")
        return out_path
