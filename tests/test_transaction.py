from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone
from decimal import Decimal
from uuid import UUID

import pytest

from envelope_budget.errors import InvalidAmountError
from envelope_budget.models import Source, Transaction, TransactionFactory

T0 = datetime(2024, 3, 5, 12, 0, tzinfo=UTC)


def _fixed_factory(start: int = 1) -> TransactionFactory:
    counter = iter(range(start, 10_000))
    return TransactionFactory(clock=lambda: T0, new_uuid=lambda: UUID(int=next(counter)))


def test_amount_is_exact_decimal():
    assert Transaction("12.10").amount == Decimal("12.10")
    assert Transaction(5).amount == Decimal(5)
    # Floats go through str(), never through their binary expansion
    assert Transaction(0.1).amount == Decimal("0.1")


@pytest.mark.parametrize("bad", ["abc", None, True, "NaN", "Infinity"])
def test_invalid_amounts_rejected(bad):
    with pytest.raises(InvalidAmountError):
        Transaction(bad)


def test_effective_date_falls_back_to_created():
    t = Transaction("1", date_created=T0)
    assert t.date == T0
    later = T0 + timedelta(days=3)
    t.date_transaction = later
    assert t.date == later


def test_naive_and_offset_dates_are_normalized_to_utc():
    t = Transaction("1", date_created=datetime(2024, 1, 1, 9, 0))
    assert t.date_created.tzinfo is UTC
    plus2 = timezone(timedelta(hours=2))
    t.date_transaction = datetime(2024, 1, 1, 1, 0, tzinfo=plus2)
    assert t.date_transaction == datetime(2023, 12, 31, 23, 0, tzinfo=UTC)
    assert t.date_transaction.tzinfo is UTC


def test_uuid_assigned_once():
    t = Transaction("1")
    assert isinstance(t.uuid, UUID)
    with pytest.raises(AttributeError):
        t.uuid = UUID(int=7)


def test_uuids_are_unique_by_default():
    assert Transaction("1").uuid != Transaction("1").uuid


def test_factory_injects_clock_and_uuid():
    make = _fixed_factory()
    a = make("1.00", category="Groceries")
    b = make("2.00")
    assert a.date_created == T0 and b.date_created == T0
    assert a.uuid == UUID(int=1)
    assert b.uuid == UUID(int=2)
    assert a.category == "Groceries"


def test_tag_is_idempotent():
    t = Transaction("1")
    t.tag("food")
    t.tag("food")
    t.tag("weekly")
    assert t.tags == ["food", "weekly"]


def test_untag_and_set_tags():
    t = Transaction("1", tags=["b", "a", "b"])
    assert t.tags == ["b", "a"]
    t.untag("b")
    t.untag("missing")
    assert t.tags == ["a"]
    t.set_tags(["z", "a", "z", "m"])
    assert t.tags == ["a", "m", "z"]


def test_short_id_range():
    assert Transaction("1", id=65535).id == 65535
    with pytest.raises(ValueError):
        Transaction("1", id=70000)


def test_is_similar_ignores_identity_and_provenance():
    a = Transaction(
        "-50", description="Shop", category="Groceries", date_created=T0, tags=["x", "y"], id=1
    )
    b = Transaction(
        "-50.00",
        description="Shop",
        category="Groceries",
        date_created=T0 - timedelta(days=10),
        date_transaction=T0,
        tags=["y", "x"],
        id=2,
        reconciled=True,
        source=Source.RECONCILIATION,
    )
    assert a.uuid != b.uuid
    assert a.is_similar(b)
    assert b.is_similar(a)


def test_is_similar_detects_differences():
    base = dict(description="Shop", category="Groceries", date_created=T0)
    a = Transaction("-50", **base)
    assert not a.is_similar(Transaction("-51", **base))
    assert not a.is_similar(Transaction("-50", **{**base, "category": "Fun"}))
    assert not a.is_similar(Transaction("-50", **{**base, "description": None}))
    assert not a.is_similar(Transaction("-50", **base, tags=["x"]))
    assert not a.is_similar(Transaction("-50", **{**base, "date_created": T0 + timedelta(1)}))


def test_in_place_amount_arithmetic_keeps_identity():
    t = Transaction("10")
    before = t.uuid
    t += "2.5"
    t -= 1
    assert t.amount == Decimal("11.5")
    assert t.uuid == before


def test_binary_amount_arithmetic_returns_a_copy():
    t = Transaction("10", category="Fun", tags=["a"], date_created=T0)
    more = t + "0.25"
    less = t - 4

    assert t.amount == Decimal("10")
    assert more.amount == Decimal("10.25")
    assert less.amount == Decimal("6")
    assert more is not t and more.uuid == t.uuid
    assert (more.category, more.tags, more.date_created) == ("Fun", ["a"], T0)
    more.tag("b")
    assert t.tags == ["a"]
    with pytest.raises(InvalidAmountError):
        _ = t + "lots"


def test_source_defaults_to_manual_and_accepts_strings():
    assert Transaction("1").source is Source.MANUAL
    assert Transaction("1", source="Reconciliation").source is Source.RECONCILIATION
