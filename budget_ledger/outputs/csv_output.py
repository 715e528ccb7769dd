# budget_ledger/outputs/csv_output.py

import csv
from pathlib import Path

from budget_ledger.outputs.base import BaseOutput


class CSVOutput(BaseOutput):
    """
    Writes the transactions to a CSV file with a header row, in ledger
    order. Unlike the ledger file itself, notes keep their commas here
    because fields are quoted.
    """
    extension = "csv"

    def export(self, transactions, username, path, month=None, year=None):
        out_path = Path(path)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        with open(out_path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)
            writer.writerow(['id', 'date', 'type', 'category', 'amount', 'note'])
            for tx in transactions:
                writer.writerow([
                    tx.id,
                    str(tx.date),
                    tx.kind.value,
                    tx.category,
                    f"{tx.amount:.2f}",
                    tx.note,
                ])
        return out_path
