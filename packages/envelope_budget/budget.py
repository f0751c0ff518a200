"""The ``Budget`` aggregate.

A budget owns the ledger, the category registry, the master categories and
three maps keyed by calendar month:

- ``allocations``: ``(month, category_id) -> Allocation``, the money budgeted
  to an envelope. Only :meth:`Budget.transfer` writes here.
- ``summaries``: ``(month, category_id) -> Summary``, running statistics of
  the transactions recorded against an envelope.
- ``uncategorised_summaries``: ``month -> Summary`` for transactions without
  a category.

Nothing is recomputed from the ledger on read; :meth:`Budget.add` updates the
ledger and the relevant summary together. The aggregate has no internal
locking; share it across threads only behind a single external lock.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from decimal import Decimal, localcontext
from types import MappingProxyType
from typing import Any
from uuid import UUID, uuid4

from .categories import CategoryRegistry, clean_name, validate_name
from .errors import CategoryNotFoundError, InvalidAmountError
from .ledger import Ledger
from .logging_setup import get_logger
from .models import (
    DECIMAL_CONTEXT,
    Allocation,
    Category,
    MasterCategory,
    Summary,
    Transaction,
    to_decimal,
)
from .months import CalendarMonth, DateLike, as_calendar_month

_logger = get_logger("envelope_budget.budget")

type BucketKey = tuple[CalendarMonth, UUID]

_ZERO = Decimal(0)


class Budget:
    def __init__(self, *, new_id: Callable[[], UUID] = uuid4) -> None:
        self._new_id = new_id
        self._ledger = Ledger()
        self._categories = CategoryRegistry(new_id=new_id)
        self._master_categories: dict[UUID, MasterCategory] = {}
        self._allocations: dict[BucketKey, Allocation] = {}
        self._summaries: dict[BucketKey, Summary] = {}
        self._uncategorised: dict[CalendarMonth, Summary] = {}

    # ------------------------------------------------------------------
    # Construction / conversion
    # ------------------------------------------------------------------

    @classmethod
    def from_transactions(
        cls, transactions: Iterable[Transaction], *, new_id: Callable[[], UUID] = uuid4
    ) -> Budget:
        budget = cls(new_id=new_id)
        for t in transactions:
            budget.add(t)
        return budget

    @classmethod
    def from_ledger(cls, ledger: Ledger, *, new_id: Callable[[], UUID] = uuid4) -> Budget:
        budget = cls.from_transactions(ledger, new_id=new_id)
        budget._ledger.file_path = ledger.file_path
        return budget

    def to_ledger(self) -> Ledger:
        return self._ledger

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def category_id(self, name: str) -> UUID:
        """Return the stable id for ``name``, registering the category if unseen."""
        return self._categories.get_or_create_id(name)

    def add(self, t: Transaction) -> None:
        """Record ``t``: update its month's summary, then append it to the ledger."""

        month = CalendarMonth.from_date(t.date)
        # Blank names count as uncategorised so recording never fails.
        if t.category is not None and validate_name(t.category).ok:
            cid = self.category_id(t.category)
            self._summaries.setdefault((month, cid), Summary()).add(t.amount)
        else:
            self._uncategorised.setdefault(month, Summary()).add(t.amount)
        self._ledger.add(t)

    def transfer(
        self,
        amount: Any,
        from_category: str,
        to_category: str,
        date: CalendarMonth | DateLike,
    ) -> None:
        """Move budgeted funds between two envelopes for one month.

        Decrements the ``from_category`` allocation and increments the
        ``to_category`` allocation by ``amount``. Categories are created when
        unseen. Actual transaction flow (ledger, summaries) is untouched.

        Raises ``InvalidAmountError`` for a non-positive amount and
        ``InvalidCategoryError`` for a blank category name.
        """

        a = to_decimal(amount)
        if a <= 0:
            raise InvalidAmountError(f"Transfer amount must be positive, got {a}")
        month = as_calendar_month(date)
        # Both names are checked before either is registered.
        clean_name(from_category)
        clean_name(to_category)
        from_id = self.category_id(from_category)
        to_id = self.category_id(to_category)

        with localcontext(DECIMAL_CONTEXT):
            self._allocations.setdefault((month, from_id), Allocation()).amount -= a
            self._allocations.setdefault((month, to_id), Allocation()).amount += a
        _logger.debug("transfer %s %s -> %s (%s)", a, from_category, to_category, month)

    def rename_category(self, old_name: str, new_name: str) -> int:
        """Rename a category and every transaction filed under it.

        The category keeps its id, so its allocations and summaries follow
        the new name. Returns the number of transactions renamed.

        Raises ``CategoryNotFoundError`` when ``old_name`` is not registered
        and ``DuplicateCategoryError`` when ``new_name`` is taken.
        """

        self._categories.rename(old_name, new_name)
        renamed = 0
        for t in self._ledger.with_category(old_name):
            t.category = new_name
            renamed += 1
        _logger.info(
            "renamed category %r -> %r (%d transactions)", old_name, new_name, renamed
        )
        return renamed

    # ------------------------------------------------------------------
    # Master categories
    # ------------------------------------------------------------------

    def _master_id(self, name: str) -> UUID | None:
        for mid, master in self._master_categories.items():
            if master.name == name:
                return mid
        return None

    def add_master_category(self, name: str, sort: int = 0) -> UUID:
        """Register a master category (idempotent by name) and return its id."""

        n = clean_name(name)
        existing = self._master_id(n)
        if existing is not None:
            return existing
        mid = self._new_id()
        self._master_categories[mid] = MasterCategory(n, sort)
        return mid

    def assign_master_category(self, category_name: str, master_name: str) -> None:
        mid = self._master_id(master_name)
        if mid is None:
            raise CategoryNotFoundError(f"Master category not found: {master_name!r}")
        cid = self.category_id(category_name)
        self._categories[cid].master_category_id = mid

    def categories_by_master(
        self, *, include_hidden: bool = False
    ) -> list[tuple[MasterCategory | None, list[Category]]]:
        """Group categories for display.

        Groups follow master ``sort`` then name; unassigned categories come
        last under ``None``. Within a group categories follow ``sort`` then
        name.
        """

        groups: dict[UUID | None, list[Category]] = {}
        for c in self._categories:
            if c.hidden and not include_hidden:
                continue
            mid = c.master_category_id if c.master_category_id in self._master_categories else None
            groups.setdefault(mid, []).append(c)

        ordered_masters = sorted(
            self._master_categories.items(), key=lambda kv: (kv[1].sort, kv[1].name)
        )
        out: list[tuple[MasterCategory | None, list[Category]]] = []
        for mid, master in ordered_masters:
            if mid in groups:
                out.append((master, sorted(groups[mid], key=lambda c: (c.sort, c.name))))
        if None in groups:
            out.append((None, sorted(groups[None], key=lambda c: (c.sort, c.name))))
        return out

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    def transactions(self) -> Iterator[Transaction]:
        return iter(self._ledger)

    def categories(self) -> Iterator[Category]:
        return iter(self._categories)

    def master_categories(self) -> Iterator[MasterCategory]:
        return iter(self._master_categories.values())

    def category(self, name: str) -> Category | None:
        return self._categories.by_name(name)

    def category_name(self, category_id: UUID) -> str | None:
        c = self._categories.get(category_id)
        return c.name if c is not None else None

    def allocation(self, month: CalendarMonth | DateLike, category: str) -> Decimal:
        """Budgeted amount for ``category`` in ``month`` (zero when never set)."""

        cid = self._categories.get_id(category)
        if cid is None:
            return _ZERO
        alloc = self._allocations.get((as_calendar_month(month), cid))
        return alloc.amount if alloc is not None else _ZERO

    def allocations(self) -> Mapping[BucketKey, Allocation]:
        return MappingProxyType(self._allocations)

    def summary(self, month: CalendarMonth | DateLike, category: str) -> Summary | None:
        cid = self._categories.get_id(category)
        if cid is None:
            return None
        return self._summaries.get((as_calendar_month(month), cid))

    def summaries(self) -> Mapping[BucketKey, Summary]:
        return MappingProxyType(self._summaries)

    def uncategorised_summary(self, month: CalendarMonth | DateLike) -> Summary | None:
        return self._uncategorised.get(as_calendar_month(month))

    def uncategorised_summaries(self) -> Mapping[CalendarMonth, Summary]:
        return MappingProxyType(self._uncategorised)

    def available(self, month: CalendarMonth | DateLike, category: str) -> Decimal:
        """Envelope balance for one month: allocation plus actual flow."""

        s = self.summary(month, category)
        flow = s.sum if s is not None else _ZERO
        with localcontext(DECIMAL_CONTEXT):
            return self.allocation(month, category) + flow

    def months(self) -> list[CalendarMonth]:
        """Every month referenced by an allocation or a summary, ascending."""

        seen = {m for m, _ in self._allocations}
        seen.update(m for m, _ in self._summaries)
        seen.update(self._uncategorised)
        return sorted(seen)

    def __repr__(self) -> str:
        return (
            f"Budget(transactions={len(self._ledger)}, categories={len(self._categories)}, "
            f"allocations={len(self._allocations)})"
        )


__all__ = ["BucketKey", "Budget"]
