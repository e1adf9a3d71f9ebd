"""Currency ledger derivation and validation."""

from __future__ import annotations

import random

import pytest

from maximus.errors import InvalidAmount
from maximus.ledger import CURRENCY_NAME, CurrencyLedger


def test_new_ledger_starts_at_tier_one() -> None:
    ledger = CurrencyLedger()
    assert ledger.total == 0
    assert ledger.tier == 1
    assert ledger.progress_in_tier == 0
    assert ledger.tier_size == 100


@pytest.mark.parametrize(
    "amounts",
    [
        [0, 0, 0],
        [99, 1],
        [100, 100, 5],
        [2, 2, 5, 20, 1, 1, 25, 5, 10, 30, 250],
    ],
)
def test_tier_and_progress_derive_from_total(amounts: list[int]) -> None:
    ledger = CurrencyLedger(tier_size=100)
    running = 0
    for amount in amounts:
        running += amount
        assert ledger.add(amount) == running
        assert ledger.tier == running // 100 + 1
        assert ledger.progress_in_tier == running % 100
        assert 0 <= ledger.progress_in_tier < ledger.tier_size


def test_derivation_holds_for_random_sequences() -> None:
    rnd = random.Random(7)
    ledger = CurrencyLedger(tier_size=37)
    for _ in range(500):
        ledger.add(rnd.randint(0, 60))
        snap = ledger.snapshot()
        assert snap.tier == snap.total // 37 + 1
        assert snap.progress_in_tier == snap.total % 37
        assert snap.tier >= 1


def test_exact_tier_boundary() -> None:
    ledger = CurrencyLedger()
    ledger.add(100)
    assert ledger.tier == 2
    assert ledger.progress_in_tier == 0


@pytest.mark.parametrize("bad", [-1, -100, 1.5, True, "10"])
def test_invalid_amounts_are_rejected(bad: object) -> None:
    ledger = CurrencyLedger()
    ledger.add(10)
    with pytest.raises(InvalidAmount):
        ledger.add(bad)  # type: ignore[arg-type]
    assert ledger.total == 10


def test_tier_size_must_be_positive() -> None:
    with pytest.raises(ValueError):
        CurrencyLedger(tier_size=0)


def test_snapshot_carries_currency_name() -> None:
    ledger = CurrencyLedger(tier_size=50)
    ledger.add(75)
    snap = ledger.snapshot()
    assert snap.model_dump() == {
        "total": 75,
        "tier": 2,
        "progress_in_tier": 25,
        "tier_size": 50,
        "currency": CURRENCY_NAME,
    }
