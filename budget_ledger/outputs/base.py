# budget_ledger/outputs/base.py
from abc import ABC, abstractmethod


class BaseOutput(ABC):
    extension = "txt"

    def __init__(self, config):
        self.config = config
        self.currency = config.get("currency", "Rs.")

    @abstractmethod
    def export(self, transactions, username, path, month=None, year=None):
        """Write the transactions for username to path."""
        pass
