"""Exception taxonomy for ``envelope_budget``.

Library code raises these; only the CLI turns them into messages and exit
codes. Each concrete error also derives from the closest built-in so callers
that already catch ``ValueError``/``KeyError`` keep working.
"""

from __future__ import annotations


class BudgetError(Exception):
    """Base class for all errors raised by the budget core."""


class InvalidAmountError(BudgetError, ValueError):
    """An amount could not be parsed, or is not allowed for the operation."""


class InvalidCategoryError(BudgetError, ValueError):
    """A category name is empty or otherwise unusable."""


class CategoryNotFoundError(BudgetError, KeyError):
    """No category (or master category) is registered under the given name."""

    def __str__(self) -> str:
        # KeyError.__str__ repr()s the message; keep it readable.
        return str(self.args[0]) if self.args else ""


class DuplicateCategoryError(BudgetError, ValueError):
    """The target name already belongs to a different category."""


class LedgerFormatError(BudgetError, ValueError):
    """A persisted ledger could not be decoded."""


__all__ = [
    "BudgetError",
    "CategoryNotFoundError",
    "DuplicateCategoryError",
    "InvalidAmountError",
    "InvalidCategoryError",
    "LedgerFormatError",
]
