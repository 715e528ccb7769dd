# budget_ledger/credentials.py
"""Username/password file used to log into the ledger.

Passwords are only obfuscated with a one-byte XOR key. This keeps casual
readers from seeing them in the file and nothing more: anyone with the file
can recover every password. Do not reuse real passwords here.
"""
from __future__ import annotations

import base64
import binascii
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterator, NamedTuple, Optional

from budget_ledger.core.errors import StorageError, ValidationError

logger = logging.getLogger(__name__)

XOR_KEY = 0x5A
_ENC_PREFIX = "enc:"


class UserRecord(NamedTuple):
    id: int
    username: str
    password_enc: str


def _xor_bytes(data: bytes, key: int = XOR_KEY) -> bytes:
    return bytes(byte ^ key for byte in data)


def encode_password(password: str) -> str:
    encoded = _xor_bytes(password.encode("utf-8"))
    return f"{_ENC_PREFIX}{base64.urlsafe_b64encode(encoded).decode('ascii')}"


def decode_password(payload: str) -> str:
    text = payload.strip("\r\n")
    if text.startswith(_ENC_PREFIX):
        try:
            raw = base64.urlsafe_b64decode(text[len(_ENC_PREFIX):].encode("ascii"))
        except (binascii.Error, ValueError):
            return ""
    else:
        # files written by the console app hold the XOR bytes as-is
        raw = text.encode("latin-1", errors="replace")
    return _xor_bytes(raw).decode("utf-8", errors="replace")


def check_username(username: str) -> str:
    name = (username or "").strip()
    if not name:
        raise ValidationError("Username must not be empty")
    if any(ch in name for ch in (",", "/", "\\")) or name in (".", ".."):
        raise ValidationError("Username must not contain ',', '/' or '\\'")
    return name


class CredentialStore:
    """Line-oriented ``id,username,obfuscated-password`` file."""

    def __init__(self, path):
        self.path = Path(path)

    def _records(self) -> Iterator[UserRecord]:
        try:
            with self.path.open("r", encoding="utf-8") as fp:
                lines = fp.read().splitlines()
        except FileNotFoundError:
            return
        except OSError as e:
            raise StorageError(f"Could not read {self.path}: {e}") from e
        for lineno, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            parts = line.split(",", 2)
            if len(parts) == 3 and parts[0].strip().isdigit():
                yield UserRecord(int(parts[0]), parts[1], parts[2])
            elif len(parts) >= 2:
                # older two-column files: username,password
                username, _, password = line.partition(",")
                yield UserRecord(lineno, username, password)

    def _find(self, username: str) -> Optional[UserRecord]:
        for record in self._records():
            if record.username == username:
                return record
        return None

    def _write(self, records) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as fp:
                for r in records:
                    fp.write(f"{r.id},{r.username},{r.password_enc}\n")
            os.replace(tmp_name, self.path)
        except OSError as e:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise StorageError(f"Could not write {self.path}: {e}") from e

    def exists(self, username: str) -> bool:
        return self._find(username) is not None

    def verify(self, username: str, password: str) -> bool:
        record = self._find(username)
        if record is None:
            return False
        return decode_password(record.password_enc) == password

    def register(self, username: str, password: str) -> bool:
        username = check_username(username)
        records = list(self._records())
        if any(r.username == username for r in records):
            return False
        next_id = max((r.id for r in records), default=0) + 1
        records.append(UserRecord(next_id, username, encode_password(password)))
        self._write(records)
        logger.info("Registered user %s", username)
        return True

    def change_password(self, username: str, old: str, new: str) -> bool:
        if not self.verify(username, old):
            return False
        records = [
            r._replace(password_enc=encode_password(new)) if r.username == username else r
            for r in self._records()
        ]
        self._write(records)
        logger.info("Changed password for %s", username)
        return True
