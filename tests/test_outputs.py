from decimal import Decimal

import openpyxl
import pytest

from budget_ledger.config import load_config
from budget_ledger.core.models import Kind
from budget_ledger.outputs import get_output
from budget_ledger.outputs.excel_output import ExcelOutput
from budget_ledger.report import render_report
from budget_ledger.store import RecordStore


def sample():
    store = RecordStore(strict=False)
    store.add(Kind.INCOME, "Salary", 1000, "2/5/2024", "May pay")
    store.add(Kind.EXPENSE, "Grocery", 300, "10/5/2024")
    store.add(Kind.EXPENSE, "Utilities", "45.5", "12/6/2024", "power, water")
    return store.all()


def test_render_report_layout():
    text = render_report(sample(), "alice", year=2024)
    lines = text.splitlines()
    assert lines[0] == "FINANCIAL REPORT for alice"
    assert lines[1] == "Period: 2024"
    assert "ID | DATE" in lines[4]
    assert lines[6].startswith("   1 | 02/05/2024 | Income")
    assert lines[7].endswith("| NA")
    assert "Total Income : Rs. 1000.00" in lines
    assert "Total Expense: Rs. 345.50" in lines
    assert "Net Savings  : Rs. 654.50" in lines
    assert lines[-1] == "Transactions : 3"


def test_render_report_empty():
    text = render_report([], "bob", currency="$")
    assert "Period: All time" in text
    assert "Net Savings  : $ 0.00" in text
    assert "Transactions : 0" in text


def test_get_output_unknown_format():
    with pytest.raises(ValueError):
        get_output("pdf", load_config())


def test_csv_output_keeps_commas(tmp_path):
    out = get_output("csv", load_config())
    path = out.export(sample(), "alice", tmp_path / "report.csv")
    lines = path.read_text().splitlines()
    assert lines[0] == "id,date,type,category,amount,note"
    assert lines[3] == '3,12/06/2024,Expense,Utilities,45.50,"power, water"'


def test_text_output_writes_report(tmp_path):
    out = get_output("txt", load_config())
    path = out.export(sample(), "alice", tmp_path / "sub" / "report.txt")
    assert path.read_text().startswith("FINANCIAL REPORT for alice")


def test_build_summary_rows_orders_months_and_totals():
    out = object.__new__(ExcelOutput)
    rows = out._build_summary_rows(sample())
    assert rows == [
        ["Month", "Income", "Expense", "Net"],
        ["05/2024", 1000.0, 300.0, 700.0],
        ["06/2024", 0.0, 45.5, -45.5],
        ["Total", 1000.0, 345.5, 654.5],
    ]


def test_build_category_rows_expense_only():
    out = object.__new__(ExcelOutput)
    assert out._build_category_rows(sample()) == [
        ["Category", "Total"],
        ["Grocery", 300.0],
        ["Utilities", 45.5],
    ]


def test_excel_output_workbook(tmp_path):
    out = get_output("excel", load_config())
    path = out.export(sample(), "alice", tmp_path / "report.xlsx")
    wb = openpyxl.load_workbook(path)
    assert wb.sheetnames == ["Transactions", "Summary", "Categories"]
    ws = wb["Transactions"]
    assert [c.value for c in ws[1]] == ["id", "date", "type", "category", "amount", "note"]
    assert ws.cell(row=2, column=4).value == "Salary"
    assert ws.cell(row=4, column=5).value == pytest.approx(45.5)
    assert wb["Summary"].cell(row=4, column=1).value == "Total"
