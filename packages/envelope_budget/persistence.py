"""Ledger persistence: JSON files and the SQL ledger store.

JSON files
----------
``save_ledger_file`` writes a :class:`~envelope_budget.records.LedgerFile`
document. Writes target ``<path>.tmp`` first and then ``os.replace`` into
place so a crash never leaves a half-written ledger behind.

SQL store
---------
``save_ledger`` upserts one ``budget_transactions`` row per transaction,
keyed by uuid; ``load_ledger`` reads them back in saved order. Both take a
caller-owned SQLAlchemy session (see ``budget_db.client.session_scope``).
"""

from __future__ import annotations

import json
import os
from collections.abc import Iterable
from decimal import Decimal
from os import PathLike
from pathlib import Path
from uuid import UUID

from budget_db.models.ledger import BudgetTransaction
from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.orm import Session

from .errors import LedgerFormatError
from .ledger import Ledger
from .logging_setup import get_logger
from .models import Source, Transaction, to_utc
from .records import LedgerFile, from_record, to_ledger_file

_logger = get_logger("envelope_budget.persistence")


# ----------------------------------------------------------------------------
# JSON files
# ----------------------------------------------------------------------------


def load_ledger_file(path: str | PathLike[str]) -> Ledger:
    """Read a ledger JSON file.

    Raises ``FileNotFoundError`` when the file is missing and
    ``LedgerFormatError`` when it is not a valid ledger document.
    """

    p = Path(path)
    raw = p.read_text(encoding="utf-8")
    try:
        doc = LedgerFile.model_validate_json(raw)
    except ValidationError as e:
        raise LedgerFormatError(f"Invalid ledger file {p}: {e}") from e

    ledger = Ledger((from_record(r) for r in doc.transactions), file_path=p)
    _logger.debug("loaded %d transactions from %s", len(ledger), p)
    return ledger


def save_ledger_file(transactions: Iterable[Transaction], path: str | PathLike[str]) -> Path:
    """Write ``transactions`` (usually a ``Ledger``) to ``path`` atomically."""

    p = Path(path)
    doc = to_ledger_file(transactions)
    payload = {
        "schema_version": doc.schema_version,
        "transactions": [r.dump() for r in doc.transactions],
    }
    p.parent.mkdir(parents=True, exist_ok=True)
    tmp = p.with_name(p.name + ".tmp")
    with tmp.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)
        f.write("\n")
    os.replace(tmp, p)
    if isinstance(transactions, Ledger):
        transactions.file_path = p
    _logger.debug("saved %d transactions to %s", len(doc.transactions), p)
    return p


# ----------------------------------------------------------------------------
# SQL store
# ----------------------------------------------------------------------------


def _row_values(t: Transaction, position: int) -> dict:
    return {
        "uuid": str(t.uuid),
        "position": position,
        "amount": str(t.amount),
        "description": t.description,
        "payee": t.payee,
        "date_created": t.date_created,
        "date_transaction": t.date_transaction,
        "category": t.category,
        "account": t.account,
        "tags": list(t.tags),
        "short_id": t.id,
        "reconciled": t.reconciled,
        "source": t.source.value,
    }


def _row_to_transaction(row: BudgetTransaction) -> Transaction:
    return Transaction(
        Decimal(row.amount),
        description=row.description,
        payee=row.payee,
        # to_utc re-tags the naive values SQLite hands back
        date_created=to_utc(row.date_created),
        date_transaction=to_utc(row.date_transaction),
        category=row.category,
        account=row.account,
        tags=list(row.tags or []),
        id=row.short_id,
        uuid=UUID(row.uuid),
        reconciled=bool(row.reconciled),
        source=Source(row.source),
    )


def save_ledger(session: Session, transactions: Iterable[Transaction]) -> int:
    """Insert or update every transaction by uuid; returns the row count.

    Rows for transactions not in ``transactions`` are left untouched.
    """

    existing: dict[str, BudgetTransaction] = {
        row.uuid: row for row in session.execute(select(BudgetTransaction)).scalars()
    }
    count = 0
    for position, t in enumerate(transactions):
        values = _row_values(t, position)
        row = existing.get(values["uuid"])
        if row is None:
            session.add(BudgetTransaction(**values))
        else:
            for key, value in values.items():
                setattr(row, key, value)
        count += 1
    session.flush()
    _logger.debug("saved %d transactions to the ledger store", count)
    return count


def load_ledger(session: Session) -> Ledger:
    """Return every stored transaction as a ``Ledger``."""

    rows = session.execute(
        select(BudgetTransaction).order_by(BudgetTransaction.position)
    ).scalars()
    ledger = Ledger(_row_to_transaction(r) for r in rows)
    _logger.debug("loaded %d transactions from the ledger store", len(ledger))
    return ledger


__all__ = [
    "load_ledger",
    "load_ledger_file",
    "save_ledger",
    "save_ledger_file",
]
