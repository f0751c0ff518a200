"""Category registry and name helpers.

The registry owns every ``Category`` a budget knows about, keyed by a
surrogate ``UUID``. A name index is kept alongside the id map so that
resolving a name is a dictionary lookup rather than a scan; the two maps always
hold the same set of ids.

Name matching is exact and case-sensitive: ``"Groceries"`` and
``"Groceries "`` are two envelopes. Only blank names are rejected.
``normalize_name`` tidies user-typed input before it becomes a name.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from uuid import UUID, uuid4

from .errors import CategoryNotFoundError, DuplicateCategoryError, InvalidCategoryError
from .logging_setup import get_logger
from .models import Category

_logger = get_logger("envelope_budget.categories")

# ---------------------------
# Name normalization/validation
# ---------------------------


def normalize_name(name: str) -> str:
    """Return a trimmed, single-spaced representation of ``name``.

    Does not change case.
    """

    return " ".join(name.strip().split())


@dataclass(frozen=True, slots=True)
class NameValidation:
    ok: bool
    reason: str | None = None


def validate_name(name: str) -> NameValidation:
    """Check that ``name`` is usable as a category name.

    Any non-blank string is accepted; there is no length limit.
    """

    if not isinstance(name, str):
        return NameValidation(False, "Name must be a string")
    if not name.strip():
        return NameValidation(False, "Name cannot be empty")
    return NameValidation(True, None)


def clean_name(name: str) -> str:
    """Return ``name`` unchanged, or raise ``InvalidCategoryError`` when blank."""

    v = validate_name(name)
    if not v.ok:
        raise InvalidCategoryError(f"Invalid category name {name!r}: {v.reason}")
    return name


# ---------------------------
# Registry
# ---------------------------


class CategoryRegistry:
    """Map of category id to ``Category`` with a name index."""

    def __init__(self, *, new_id: Callable[[], UUID] = uuid4) -> None:
        self._new_id = new_id
        self._by_id: dict[UUID, Category] = {}
        self._index: dict[str, UUID] = {}

    def get_id(self, name: str) -> UUID | None:
        return self._index.get(name)

    def get_or_create_id(self, name: str) -> UUID:
        """Return the id registered for ``name``, registering it if unseen."""

        n = clean_name(name)
        existing = self._index.get(n)
        if existing is not None:
            return existing
        cid = self._new_id()
        self._by_id[cid] = Category(n)
        self._index[n] = cid
        _logger.debug("created category %r id=%s", n, cid)
        return cid

    def get(self, category_id: UUID) -> Category | None:
        return self._by_id.get(category_id)

    def __getitem__(self, category_id: UUID) -> Category:
        try:
            return self._by_id[category_id]
        except KeyError:
            raise CategoryNotFoundError(f"No category with id {category_id}") from None

    def by_name(self, name: str) -> Category | None:
        cid = self.get_id(name)
        return self._by_id[cid] if cid is not None else None

    def rename(self, old_name: str, new_name: str) -> UUID:
        """Rename a category in place and return its (unchanged) id."""

        new = clean_name(new_name)
        cid = self._index.get(old_name)
        if cid is None:
            raise CategoryNotFoundError(f"Category not found: {old_name!r}")
        if new == old_name:
            return cid
        if new in self._index:
            raise DuplicateCategoryError(f"Category {new!r} already exists")
        del self._index[old_name]
        self._index[new] = cid
        self._by_id[cid].name = new
        return cid

    def items(self) -> Iterator[tuple[UUID, Category]]:
        return iter(self._by_id.items())

    def __iter__(self) -> Iterator[Category]:
        return iter(self._by_id.values())

    def __len__(self) -> int:
        return len(self._by_id)

    def __contains__(self, category_id: object) -> bool:
        return category_id in self._by_id


__all__ = [
    "CategoryRegistry",
    "NameValidation",
    "clean_name",
    "normalize_name",
    "validate_name",
]
