"""ORM models registry for the ledger database."""

from .ledger import Base, BudgetTransaction

__all__ = [
    "Base",
    "BudgetTransaction",
]
