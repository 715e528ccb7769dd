# budget_ledger/storage.py
"""Flat-file persistence for transactions and budget settings.

Transaction files hold one line per transaction::

    id,Kind,category,amount,DD/MM/YYYY,note

The note is everything after the fifth comma. Commas inside a note or a
category are written as ``;``. Lines that cannot be parsed are skipped so a
partially corrupt file still loads.

There is no file locking: two processes saving the same user's file race and
the last writer wins.
"""
from __future__ import annotations

import logging
import os
import tempfile
from decimal import Decimal
from pathlib import Path
from typing import Iterable, List, Optional

from budget_ledger import dates
from budget_ledger.core.errors import StorageError, ValidationError
from budget_ledger.core.models import Kind, Transaction
from budget_ledger.store import RecordStore, quantize_cents

logger = logging.getLogger(__name__)

DELIMITER = ","
SUBSTITUTE = ";"
BUDGET_KEYS = ("budget_limit", "budget")


def _sanitize(text: str) -> str:
    return (text or "").replace(DELIMITER, SUBSTITUTE).replace("\n", " ").replace("\r", " ")


def serialize(transactions: Iterable[Transaction]) -> List[str]:
    lines = []
    for tx in transactions:
        lines.append(DELIMITER.join([
            str(tx.id),
            tx.kind.value,
            _sanitize(tx.category),
            f"{tx.amount:.2f}",
            str(tx.date),
            _sanitize(tx.note),
        ]))
    return lines


def parse_line(line: str) -> Optional[Transaction]:
    """Parse one stored line, returning ``None`` when it is malformed."""
    text = line.rstrip("\r\n")
    if not text.strip():
        return None
    parts = text.split(DELIMITER, 5)
    if len(parts) < 5:
        return None
    raw_id, raw_kind, category, raw_amount, raw_date = (p.strip() for p in parts[:5])
    note = parts[5] if len(parts) == 6 else ""
    try:
        txn_id = int(raw_id)
        kind = Kind.parse(raw_kind)
        when = dates.parse(raw_date)
    except (ValueError, ValidationError):
        return None
    amount = quantize_cents(raw_amount)
    if amount is None or amount <= 0:
        return None
    if txn_id <= 0 or not category:
        return None
    return Transaction(id=txn_id, kind=kind, category=category,
                       amount=amount, date=when, note=note)


def deserialize(lines: Iterable[str], strict: bool = True) -> RecordStore:
    transactions = []
    seen_ids = set()
    for lineno, line in enumerate(lines, start=1):
        tx = parse_line(line)
        if tx is None:
            if line.strip():
                logger.debug("Skipping malformed ledger line %d: %r", lineno, line)
            continue
        if tx.id in seen_ids:
            logger.debug("Skipping ledger line %d with repeated id %d", lineno, tx.id)
            continue
        seen_ids.add(tx.id)
        transactions.append(tx)
    return RecordStore(transactions, strict=strict)


def _atomic_write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as fp:
            fp.write(content)
            fp.flush()
            os.fsync(fp.fileno())
        os.replace(tmp_name, path)
    except OSError as e:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise StorageError(f"Could not write {path}: {e}") from e


def load_transactions(path, strict: bool = True) -> RecordStore:
    target = Path(path)
    if not target.exists():
        return RecordStore(strict=strict)
    try:
        with target.open("r", encoding="utf-8") as fp:
            return deserialize(fp, strict=strict)
    except OSError as e:
        raise StorageError(f"Could not read {target}: {e}") from e


def save_transactions(path, transactions: Iterable[Transaction]) -> None:
    lines = serialize(transactions)
    _atomic_write(Path(path), "".join(line + "\n" for line in lines))
    logger.info("Saved %d transaction(s) to %s", len(lines), path)


def load_budget_limit(path) -> Decimal:
    """Read ``budget_limit:<value>`` (or legacy ``budget:<value>``); 0 if absent."""
    target = Path(path)
    try:
        first = target.read_text(encoding="utf-8").splitlines()
    except (FileNotFoundError, IsADirectoryError, PermissionError):
        return Decimal("0")
    if not first:
        return Decimal("0")
    key, sep, value = first[0].partition(":")
    if not sep or key.strip() not in BUDGET_KEYS:
        return Decimal("0")
    limit = quantize_cents(value)
    return limit if limit is not None and limit > 0 else Decimal("0")


def save_budget_limit(path, limit) -> None:
    _atomic_write(Path(path), f"budget_limit:{Decimal(str(limit)):.2f}\n")
