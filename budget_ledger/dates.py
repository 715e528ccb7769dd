# budget_ledger/dates.py
"""Day/month/year handling for ledger entries.

Ledger dates are plain triples rather than :class:`datetime.date` objects:
only the ranges of each field are checked, so ``31/02/2024`` is accepted.
"""
from __future__ import annotations

import re
from datetime import date, datetime
from typing import NamedTuple

from budget_ledger.core.errors import FormatError, ValidationError

_DATE_RE = re.compile(r"^\s*(\d+)\s*/\s*(\d+)\s*/\s*(\d+)\s*$")


class LedgerDate(NamedTuple):
    day: int
    month: int
    year: int

    def __str__(self) -> str:
        return f"{self.day:02d}/{self.month:02d}/{self.year:04d}"

    @property
    def period(self) -> tuple[int, int]:
        return self.month, self.year


def validate(day: int, month: int, year: int) -> bool:
    if month < 1 or month > 12:
        return False
    if day < 1 or day > 31:
        return False
    if year < 1900 or year > 9999:
        return False
    return True


def parse(text: str) -> LedgerDate:
    """Parse ``D/M/Y`` into a :class:`LedgerDate`.

    Raises :class:`FormatError` when the text is not three integers separated
    by ``/`` and :class:`ValidationError` when a field is out of range.
    """
    match = _DATE_RE.match(text or "")
    if not match:
        raise FormatError(f"Invalid date '{text}', expected D/M/Y")
    day, month, year = (int(part) for part in match.groups())
    if not validate(day, month, year):
        raise ValidationError(f"Date out of range: {text}")
    return LedgerDate(day, month, year)


def today() -> LedgerDate:
    now = datetime.now()
    return LedgerDate(now.day, now.month, now.year)


def coerce(value) -> LedgerDate:
    """Turn a string, tuple, date or LedgerDate into a validated LedgerDate."""
    if value is None:
        return today()
    if isinstance(value, str):
        return parse(value)
    if isinstance(value, (date, datetime)):
        fields = (value.day, value.month, value.year)
    elif isinstance(value, tuple) and len(value) == 3:
        try:
            fields = tuple(int(part) for part in value)
        except (TypeError, ValueError):
            raise FormatError(f"Invalid date {value!r}, expected day, month, year") from None
    else:
        raise FormatError(f"Unrecognized date value: {value!r}")
    if not validate(*fields):
        raise ValidationError(f"Date out of range: {value}")
    return LedgerDate(*fields)
