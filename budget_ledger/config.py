# budget_ledger/config.py
from __future__ import annotations

import copy
from pathlib import Path
from typing import Dict

import yaml

from budget_ledger.categories import DEFAULT_CATEGORIES

DEFAULT_CONFIG: Dict[str, object] = {
    "data_dir": ".",
    "users_file": "users.csv",
    "transactions_file": "user_{username}.csv",
    "settings_file": "user_{username}_settings.txt",
    "report_file": "report_{username}",
    "currency": "Rs.",
    "strict": True,
    "categories": list(DEFAULT_CATEGORIES),
    "output_modules": {
        "txt": "budget_ledger.outputs.text_output.TextOutput",
        "csv": "budget_ledger.outputs.csv_output.CSVOutput",
        "excel": "budget_ledger.outputs.excel_output.ExcelOutput",
    },
}


def _merge_defaults(current: Dict[str, object], defaults: Dict[str, object]) -> Dict[str, object]:
    """Merge missing default keys into the current config recursively."""
    merged = dict(current)
    for key, value in defaults.items():
        if key not in merged:
            merged[key] = copy.deepcopy(value)
        elif isinstance(value, dict) and isinstance(merged[key], dict):
            merged[key] = _merge_defaults(merged[key], value)
    return merged


def load_config(path=None) -> Dict[str, object]:
    if path is None or not Path(path).exists():
        return copy.deepcopy(DEFAULT_CONFIG)
    with Path(path).open("r", encoding="utf-8") as fp:
        data = yaml.safe_load(fp) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return _merge_defaults(data, DEFAULT_CONFIG)


def save_config(config: Dict[str, object], path) -> None:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as fp:
        yaml.safe_dump(config, fp, sort_keys=False)


def user_path(config: Dict[str, object], key: str, username: str) -> Path:
    """Resolve a per-user file name template inside the data directory."""
    name = str(config[key]).format(username=username)
    return Path(str(config["data_dir"])) / name


def users_path(config: Dict[str, object]) -> Path:
    return Path(str(config["data_dir"])) / str(config["users_file"])
