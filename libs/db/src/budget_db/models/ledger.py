from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    Integer,
    String,
    Text,
    func,
    text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import expression as sa_expr


class Base(DeclarativeBase):
    pass


# ---------------------------
# Core: budget_transactions
# ---------------------------


class BudgetTransaction(Base):
    __tablename__ = "budget_transactions"

    uuid: Mapped[str] = mapped_column(String(36), primary_key=True)
    # Index in the saved ledger; loads order by it so equal-date runs keep
    # their original order.
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    # Decimal text. SQLite has no exact numeric type, and amounts must
    # round-trip digit for digit.
    amount: Mapped[str] = mapped_column(String(64), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    payee: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Stored as UTC; SQLite drops tzinfo, so readers re-tag as UTC.
    date_created: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    date_transaction: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    category: Mapped[str | None] = mapped_column(Text, nullable=True)
    account: Mapped[str | None] = mapped_column(Text, nullable=True)
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False)
    short_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    reconciled: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=sa_expr.false()
    )
    source: Mapped[str] = mapped_column(
        String, nullable=False, server_default=text("'Manual'")
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    __table_args__ = (
        CheckConstraint(
            "source in ('Manual','Reconciliation')",
            name="ck_budget_tx_source",
        ),
        CheckConstraint(
            "short_id IS NULL OR (short_id >= 0 AND short_id <= 65535)",
            name="ck_budget_tx_short_id",
        ),
    )


__all__ = [
    "Base",
    "BudgetTransaction",
]
