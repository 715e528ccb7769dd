# budget_ledger/session.py
"""Per-login session context.

A :class:`Session` owns everything that belongs to one authenticated user:
the record store, the category set and the budget. It is created at login
and dropped at logout.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict, Optional

from budget_ledger import storage, summary
from budget_ledger.budget import BudgetPolicy, BudgetStatus
from budget_ledger.categories import CategorySet
from budget_ledger.config import load_config, user_path
from budget_ledger.core.models import AddResult, Advisory, Kind, Transaction
from budget_ledger.outputs import get_output
from budget_ledger.store import RecordStore

logger = logging.getLogger(__name__)


class Session:
    def __init__(self, username: str, store: RecordStore, budget: BudgetPolicy,
                 categories: CategorySet, config: Dict[str, object]):
        self.username = username
        self.store = store
        self.budget = budget
        self.categories = categories
        self.config = config

    @classmethod
    def open(cls, username: str, config: Optional[Dict[str, object]] = None) -> "Session":
        config = config or load_config()
        strict = bool(config.get("strict", True))
        store = storage.load_transactions(user_path(config, "transactions_file", username),
                                          strict=strict)
        limit = storage.load_budget_limit(user_path(config, "settings_file", username))
        categories = CategorySet(config.get("categories"))
        logger.info("Opened ledger for %s with %d transaction(s)", username, len(store))
        return cls(username, store, BudgetPolicy(limit), categories, config)

    @property
    def transactions_path(self) -> Path:
        return user_path(self.config, "transactions_file", self.username)

    @property
    def settings_path(self) -> Path:
        return user_path(self.config, "settings_file", self.username)

    @property
    def strict(self) -> bool:
        return self.store.strict

    def save(self) -> None:
        storage.save_transactions(self.transactions_path, self.store)

    def add_transaction(
        self,
        kind,
        category: str,
        amount,
        date=None,
        note: str = "",
        confirm: Optional[Callable[[list], bool]] = None,
    ) -> Optional[AddResult]:
        """Add an entry, asking ``confirm`` first when it would overspend.

        Returns ``None`` when ``confirm`` declines. In strict mode the ledger
        is flushed to disk after every successful add.
        """
        advisories = self.store.check(kind, category, amount, date, self.budget.limit)
        if Advisory.OVERSPEND in advisories and confirm is not None:
            if not confirm(advisories):
                logger.info("Add cancelled by user after overspend warning")
                return None

        result = self.store.add(kind, category, amount, date, note, self.budget.limit)
        if result.transaction.kind is Kind.EXPENSE:
            self.categories.add(result.transaction.category)
        if self.strict:
            self.save()
        return result

    def edit_transaction(self, txn_id: int, **updates) -> Transaction:
        return self.store.edit(txn_id, **updates)

    def delete_transaction(self, txn_id: int) -> bool:
        return self.store.delete(txn_id)

    def set_budget(self, limit):
        value = self.budget.set(limit)
        storage.save_budget_limit(self.settings_path, value)
        return value

    def budget_status(self, month: int, year: int) -> BudgetStatus:
        return self.budget.status_for(self.store, month, year)

    def monthly(self, month: int, year: int) -> summary.PeriodSummary:
        return summary.monthly_summary(self.store, month, year)

    def yearly(self, year: int) -> summary.YearSummary:
        return summary.yearly_summary(self.store, year)

    def health(self, month: int, year: int) -> summary.MonthlyHealth:
        return summary.financial_health(self.store, month, year)

    def report_path(self, ext: str, month: Optional[int] = None,
                    year: Optional[int] = None) -> Path:
        name = str(self.config["report_file"]).format(username=self.username)
        if year is not None:
            name += f"_{year:04d}"
            if month is not None:
                name += f"_{month:02d}"
        return Path(str(self.config["data_dir"])) / f"{name}.{ext}"

    def export_report(self, fmt: str = "txt", month: Optional[int] = None,
                      year: Optional[int] = None) -> Path:
        outputter = get_output(fmt, self.config)
        txs = summary.filter_by_period(self.store, month, year)
        path = self.report_path(outputter.extension, month, year)
        outputter.export(txs, self.username, path, month=month, year=year)
        return path
