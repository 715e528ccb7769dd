# budget_ledger/categories.py
from typing import Iterable, List, Optional

DEFAULT_CATEGORIES = [
    "Grocery",
    "Utilities",
    "Transportation",
    "Dining & Food",
    "Shopping",
    "Others",
]


class CategorySet:
    """Expense categories offered during one session.

    Seeded from defaults and extended at runtime; never written to disk.
    """

    def __init__(self, defaults: Optional[Iterable[str]] = None):
        self._names: List[str] = []
        for name in DEFAULT_CATEGORIES if defaults is None else defaults:
            self.add(name)

    def add(self, name: str) -> bool:
        name = (name or "").strip()
        if not name or name in self._names:
            return False
        self._names.append(name)
        return True

    def choose(self, index: int) -> str:
        """Return the category at a 1-based menu position."""
        if index < 1 or index > len(self._names):
            raise IndexError(f"No category number {index}")
        return self._names[index - 1]

    def __contains__(self, name) -> bool:
        return name in self._names

    def __iter__(self):
        return iter(list(self._names))

    def __len__(self) -> int:
        return len(self._names)
