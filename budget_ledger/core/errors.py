# budget_ledger/core/errors.py


class LedgerError(Exception):
    """Base class for every error raised by the ledger core."""


class ValidationError(LedgerError, ValueError):
    """Bad amount, empty category, out of range date and similar input."""


class FormatError(ValidationError):
    """Text that does not match the expected ``D/M/Y`` shape."""


class DuplicateSalaryError(LedgerError):
    def __init__(self, month, year):
        self.month = month
        self.year = year
        super().__init__(f"Salary already recorded for {month:02d}/{year:04d}")


class NoIncomeError(LedgerError):
    def __init__(self, month, year):
        self.month = month
        self.year = year
        super().__init__(
            f"No income recorded for {month:02d}/{year:04d}; add income before expenses"
        )


class NotFoundError(LedgerError, LookupError):
    def __init__(self, txn_id):
        self.txn_id = txn_id
        super().__init__(f"Transaction {txn_id} not found")


class StorageError(LedgerError, OSError):
    """A ledger file could not be read or written."""
