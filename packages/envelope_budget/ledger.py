"""The ledger: an append-only journal of transactions kept in date order."""

from __future__ import annotations

import bisect
from collections.abc import Iterable, Iterator
from os import PathLike
from pathlib import Path
from uuid import UUID

from .models import Transaction


def _effective_date(t: Transaction):
    return t.date


class Ledger:
    """Transactions sorted by effective date, ascending.

    Every insertion keeps the order; a transaction whose date equals existing
    entries is placed after them, so equal-date runs stay in insertion order.
    The ledger takes ownership of what is added and never removes entries.
    """

    def __init__(self, transactions: Iterable[Transaction] = (), *, file_path: Path | None = None):
        self._transactions: list[Transaction] = sorted(transactions, key=_effective_date)
        self.file_path = file_path

    @classmethod
    def from_transactions(cls, transactions: Iterable[Transaction]) -> Ledger:
        return cls(transactions)

    @classmethod
    def from_file(cls, path: str | PathLike[str]) -> Ledger:
        """Load a JSON ledger file written by :func:`save_ledger_file`."""

        from .persistence import load_ledger_file  # persistence imports Ledger

        return load_ledger_file(path)

    def add(self, t: Transaction) -> None:
        bisect.insort_right(self._transactions, t, key=_effective_date)

    def categories(self) -> list[str]:
        """Distinct non-blank category names in ledger order."""
        return list(
            dict.fromkeys(
                t.category for t in self._transactions if t.category and t.category.strip()
            )
        )

    def with_category(self, name: str) -> Iterator[Transaction]:
        return (t for t in self._transactions if t.category == name)

    def find(self, uuid: UUID) -> Transaction | None:
        for t in self._transactions:
            if t.uuid == uuid:
                return t
        return None

    def similar_to(self, other: Transaction) -> list[Transaction]:
        """Transactions similar to ``other`` (see ``Transaction.is_similar``)."""
        return [t for t in self._transactions if t.is_similar(other)]

    def __iter__(self) -> Iterator[Transaction]:
        return iter(self._transactions)

    def __len__(self) -> int:
        return len(self._transactions)

    def __getitem__(self, index: int) -> Transaction:
        return self._transactions[index]

    def __repr__(self) -> str:
        return f"Ledger(n={len(self._transactions)}, file_path={self.file_path!r})"


__all__ = ["Ledger"]
