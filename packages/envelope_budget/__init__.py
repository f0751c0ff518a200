"""Public interface for the ``envelope_budget`` package.

This module exposes the budget core's models and aggregate as the stable
import surface. There is no runtime logic here, only symbol re-exports.

Persistence helpers (``envelope_budget.persistence``) and the CLI
(``envelope_budget.cli``) are imported from their modules directly so that
using the in-memory core does not pull in the database layer.
"""

from .budget import Budget
from .categories import CategoryRegistry, normalize_name, validate_name
from .errors import (
    BudgetError,
    CategoryNotFoundError,
    DuplicateCategoryError,
    InvalidAmountError,
    InvalidCategoryError,
    LedgerFormatError,
)
from .ledger import Ledger
from .models import (
    Allocation,
    Category,
    MasterCategory,
    Source,
    Summary,
    Transaction,
    TransactionFactory,
)
from .months import CalendarMonth, Month
from .records import LedgerFile, TransactionRecord, from_record, to_record

__all__ = [
    # Aggregate
    "Budget",
    "Ledger",
    "CategoryRegistry",
    # Models / types
    "Allocation",
    "CalendarMonth",
    "Category",
    "MasterCategory",
    "Month",
    "Source",
    "Summary",
    "Transaction",
    "TransactionFactory",
    # Wire format
    "LedgerFile",
    "TransactionRecord",
    "from_record",
    "to_record",
    # Helpers
    "normalize_name",
    "validate_name",
    # Errors
    "BudgetError",
    "CategoryNotFoundError",
    "DuplicateCategoryError",
    "InvalidAmountError",
    "InvalidCategoryError",
    "LedgerFormatError",
]
