"""Value records for the budget core.

``Transaction`` is the unit of the ledger. ``Category``/``MasterCategory``
are the envelopes transactions are classified into. ``Allocation`` and
``Summary`` are the per-(month, category) buckets the ``Budget`` maintains
incrementally.

All money is ``decimal.Decimal``; binary floats are never stored.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import KW_ONLY, dataclass, field, replace
from datetime import UTC, datetime
from decimal import Context, Decimal, InvalidOperation, localcontext
from enum import StrEnum
from typing import Any
from uuid import UUID, uuid4

from .errors import InvalidAmountError

# 34 significant digits: the width of a 128-bit decimal.
DECIMAL_CONTEXT = Context(prec=34)

_ZERO = Decimal(0)
_MAX_SHORT_ID = 0xFFFF


def utcnow() -> datetime:
    return datetime.now(UTC)


def to_decimal(raw: Any) -> Decimal:
    """Coerce ``raw`` to a finite ``Decimal``.

    Floats go through ``str()`` so ``0.1`` becomes ``Decimal("0.1")`` rather
    than its binary expansion.
    """

    if isinstance(raw, bool):
        raise InvalidAmountError(f"Invalid amount: {raw!r}")
    if isinstance(raw, Decimal):
        d = raw
    else:
        try:
            d = Decimal(str(raw))
        except (InvalidOperation, ValueError):
            raise InvalidAmountError(f"Invalid amount: {raw!r}") from None
    if not d.is_finite():
        raise InvalidAmountError(f"Invalid amount: {raw!r}")
    return d


def to_utc(value: datetime | None) -> datetime | None:
    """Naive datetimes are taken to be UTC; aware ones are converted."""

    if value is None:
        return None
    if not isinstance(value, datetime):
        raise TypeError(f"expected datetime, got {type(value).__name__}")
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class Source(StrEnum):
    """Where a transaction came from."""

    MANUAL = "Manual"
    RECONCILIATION = "Reconciliation"


# ---------------------------------------------------------------------------
# Transaction
# ---------------------------------------------------------------------------


@dataclass
class Transaction:
    """One monetary movement.

    Attributes
    ----------
    amount:
        Positive values flow into the account, negative values out of it.
    date_created:
        When the record was created. Used as the effective date when
        ``date_transaction`` is not set.
    date_transaction:
        When the movement actually happened.
    category:
        Category *name*; the ``Budget`` resolves it to a stable identity.
    tags:
        Unique labels. ``set_tags`` stores them sorted.
    id:
        Optional, non-unique short number (0..65535) used when reconciling
        against external statements.
    uuid:
        Globally unique identity, assigned once at construction.
    reconciled:
        Once true the budget has been reconciled past this transaction and the
        record should be treated as frozen.
    """

    amount: Decimal
    _: KW_ONLY
    description: str | None = None
    payee: str | None = None
    date_created: datetime = field(default_factory=utcnow)
    date_transaction: datetime | None = None
    category: str | None = None
    account: str | None = None
    tags: list[str] = field(default_factory=list)
    id: int | None = None
    uuid: UUID = field(default_factory=uuid4)
    reconciled: bool = False
    source: Source = Source.MANUAL

    def __post_init__(self) -> None:
        # Keep caller order but drop duplicates; only set_tags sorts.
        self.tags = list(dict.fromkeys(self.tags))
        if self.id is not None and not 0 <= self.id <= _MAX_SHORT_ID:
            raise ValueError(f"Transaction.id must be within 0..{_MAX_SHORT_ID}, got {self.id}")
        self.source = Source(self.source)

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "uuid" and "uuid" in self.__dict__:
            raise AttributeError("Transaction.uuid is assigned once at construction")
        if name == "amount":
            value = to_decimal(value)
        elif name in ("date_created", "date_transaction"):
            value = to_utc(value)
        object.__setattr__(self, name, value)

    @property
    def date(self) -> datetime:
        """Effective date: the transaction date when set, else the creation date."""
        return self.date_transaction if self.date_transaction is not None else self.date_created

    # -- tags -----------------------------------------------------------------

    def tag(self, tag: str) -> None:
        """Add ``tag`` unless it is already present."""
        if tag not in self.tags:
            self.tags.append(tag)

    def untag(self, tag: str) -> None:
        """Remove ``tag`` if present."""
        self.tags = [t for t in self.tags if t != tag]

    def set_tags(self, tags: Iterable[str]) -> None:
        """Replace the tags with exactly ``tags``, sorted and deduplicated."""
        self.tags = sorted(set(tags))

    # -- comparison -----------------------------------------------------------

    def is_similar(self, other: Transaction) -> bool:
        """True when amount, description, category, effective date and tags match.

        Identity and provenance (uuid, id, created date, source, reconciled)
        are not considered.
        """

        return (
            self.amount == other.amount
            and self.description == other.description
            and self.category == other.category
            and self.date == other.date
            and set(self.tags) == set(other.tags)
        )

    # -- amount arithmetic ----------------------------------------------------

    def __add__(self, other: Any) -> Transaction:
        """Copy with ``other`` added to the amount. The copy keeps the uuid."""
        return replace(self, amount=self.amount + to_decimal(other))

    def __sub__(self, other: Any) -> Transaction:
        return replace(self, amount=self.amount - to_decimal(other))

    def __iadd__(self, other: Any) -> Transaction:
        self.amount = self.amount + to_decimal(other)
        return self

    def __isub__(self, other: Any) -> Transaction:
        self.amount = self.amount - to_decimal(other)
        return self


@dataclass(frozen=True, slots=True)
class TransactionFactory:
    """Build transactions with an injected clock and uuid generator."""

    clock: Callable[[], datetime] = utcnow
    new_uuid: Callable[[], UUID] = uuid4

    def __call__(self, amount: Any, **fields: Any) -> Transaction:
        fields.setdefault("date_created", self.clock())
        fields.setdefault("uuid", self.new_uuid())
        return Transaction(amount, **fields)


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class MasterCategory:
    """Display group for categories."""

    name: str
    sort: int = 0


@dataclass(slots=True)
class Category:
    name: str
    sort: int = 0
    hidden: bool = False
    master_category_id: UUID | None = None


# ---------------------------------------------------------------------------
# Per-(month, category) buckets
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class Allocation:
    """Money budgeted to a category for one month."""

    amount: Decimal = _ZERO


@dataclass(slots=True)
class Summary:
    """Running count, sum and sum of squares of transaction amounts.

    Mean and variance are derived from the three running totals, so the
    ledger never has to be rescanned. An empty summary reports zeros.
    """

    n: int = 0
    sum: Decimal = _ZERO
    sum_squared: Decimal = _ZERO

    def add(self, amount: Decimal) -> None:
        with localcontext(DECIMAL_CONTEXT):
            self.n += 1
            self.sum += amount
            self.sum_squared += amount * amount

    @property
    def mean(self) -> Decimal:
        if self.n == 0:
            return _ZERO
        with localcontext(DECIMAL_CONTEXT):
            return self.sum / self.n

    @property
    def variance(self) -> Decimal:
        """Population variance, ``sum_squared / n - mean**2``."""
        if self.n == 0:
            return _ZERO
        with localcontext(DECIMAL_CONTEXT):
            mean = self.sum / self.n
            var = self.sum_squared / self.n - mean * mean
        # Rounding can leave a tiny negative residue for constant series.
        return var if var > 0 else _ZERO

    @property
    def std_dev(self) -> Decimal:
        with localcontext(DECIMAL_CONTEXT):
            return self.variance.sqrt()


__all__ = [
    "DECIMAL_CONTEXT",
    "Allocation",
    "Category",
    "MasterCategory",
    "Source",
    "Summary",
    "Transaction",
    "TransactionFactory",
    "to_decimal",
    "to_utc",
    "utcnow",
]
