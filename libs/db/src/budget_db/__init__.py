"""budget_db: SQL storage for envelope_budget ledgers (SQLAlchemy).

Public exports
--------------
- ``Base`` and ``metadata`` for schema creation
- ORM models in ``budget_db.models.ledger`` (re-exported for convenience)
- Engine/session helpers in ``budget_db.client``
"""

from __future__ import annotations

from .models.ledger import Base, BudgetTransaction

metadata = Base.metadata

__all__ = [
    "Base",
    "BudgetTransaction",
    "metadata",
]
