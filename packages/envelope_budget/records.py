"""Serialized shape of transactions and ledger files.

``TransactionRecord`` mirrors ``Transaction`` field for field. Optional fields
are left out of dumps when unset (``exclude_none``) and amounts are written as
decimal strings so no precision is lost. ``LedgerFile`` is the top-level JSON
document written by ``persistence.save_ledger_file``.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models import Source, Transaction, to_decimal, to_utc

# Bump only when the on-disk ledger JSON shape changes.
SCHEMA_VERSION: int = 1


class TransactionRecord(BaseModel):
    model_config = ConfigDict(extra="forbid")

    amount: Decimal
    description: str | None = None
    payee: str | None = None
    date_created: datetime
    date_transaction: datetime | None = None
    category: str | None = None
    account: str | None = None
    tags: list[str] = Field(default_factory=list)
    id: int | None = Field(default=None, ge=0, le=0xFFFF)
    uuid: UUID
    reconciled: bool = False
    source: Source = Source.MANUAL

    @field_validator("amount", mode="before")
    @classmethod
    def _exact_amount(cls, v: Any) -> Decimal:
        return to_decimal(v)

    @field_validator("date_created", "date_transaction")
    @classmethod
    def _utc(cls, v: datetime | None) -> datetime | None:
        return to_utc(v)

    def dump(self) -> dict[str, Any]:
        """JSON-ready mapping with absent optional fields omitted."""
        return self.model_dump(mode="json", exclude_none=True)


class LedgerFile(BaseModel):
    """Top-level schema for a ledger JSON file."""

    model_config = ConfigDict(extra="forbid")

    schema_version: int = SCHEMA_VERSION
    transactions: list[TransactionRecord] = Field(default_factory=list)

    @field_validator("schema_version")
    @classmethod
    def _known_version(cls, v: int) -> int:
        if v != SCHEMA_VERSION:
            raise ValueError(f"unsupported ledger schema_version {v} (expected {SCHEMA_VERSION})")
        return v


def to_record(t: Transaction) -> TransactionRecord:
    return TransactionRecord(
        amount=t.amount,
        description=t.description,
        payee=t.payee,
        date_created=t.date_created,
        date_transaction=t.date_transaction,
        category=t.category,
        account=t.account,
        tags=list(t.tags),
        id=t.id,
        uuid=t.uuid,
        reconciled=t.reconciled,
        source=t.source,
    )


def from_record(r: TransactionRecord) -> Transaction:
    return Transaction(
        r.amount,
        description=r.description,
        payee=r.payee,
        date_created=r.date_created,
        date_transaction=r.date_transaction,
        category=r.category,
        account=r.account,
        tags=list(r.tags),
        id=r.id,
        uuid=r.uuid,
        reconciled=r.reconciled,
        source=r.source,
    )


def to_ledger_file(transactions: Iterable[Transaction]) -> LedgerFile:
    return LedgerFile(transactions=[to_record(t) for t in transactions])


__all__ = [
    "SCHEMA_VERSION",
    "LedgerFile",
    "TransactionRecord",
    "from_record",
    "to_ledger_file",
    "to_record",
]
