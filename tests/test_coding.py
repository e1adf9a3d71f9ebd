from __future__ import annotations

import pytest

from maximus.errors import InvalidAction
from maximus.ledger import CurrencyLedger
from maximus.modules.coding import CodingSession, simulate


@pytest.mark.parametrize(
    ("blocks", "expected"),
    [
        ([], (0, 0, 0)),
        (["moveForward"], (0, 1, 0)),
        (["turnRight", "moveForward", "moveForward"], (2, 0, 1)),
        (["turnLeft", "moveForward"], (-1, 0, 3)),
        (["repeat2", "moveForward"], (0, 2, 0)),
        (["repeat2", "turnRight", "moveForward"], (0, -1, 2)),
        (["onStart", "moveForward", "repeat2"], (0, 1, 0)),
    ],
)
def test_simulate(blocks: list[str], expected: tuple[int, int, int]) -> None:
    assert simulate(blocks) == expected


def test_add_block_rewards_and_rejects_unknown(ledger: CurrencyLedger) -> None:
    session = CodingSession(ledger)
    notices = session.add_block("moveForward")
    assert notices[0].title == "Block Added!"
    assert "Move Forward" in notices[0].description
    assert session.blocks == ["moveForward"]
    assert ledger.total == 2

    with pytest.raises(InvalidAction):
        session.add_block("jump")
    assert ledger.total == 2


def test_run_rewards_by_program_length(ledger: CurrencyLedger) -> None:
    session = CodingSession(ledger)
    for block in ("onStart", "turnRight", "moveForward"):
        session.add_block(block)

    reward, notices = session.run()

    assert reward == 3 * 5 + 10
    assert ledger.total == 6 + 25
    assert notices[0].title == "Program Executed!"
    state = session.state()
    assert state["position"] == {"x": 1, "y": 0}
    assert state["heading"] == 1
    assert state["runs"] == 1


def test_run_empty_program_earns_nothing(ledger: CurrencyLedger) -> None:
    session = CodingSession(ledger)
    reward, notices = session.run()
    assert reward == 0
    assert notices[0].kind == "error"
    assert ledger.total == 0


def test_clear_resets_workspace(ledger: CurrencyLedger) -> None:
    session = CodingSession(ledger)
    session.add_block("moveForward")
    session.run()
    session.clear()
    assert session.blocks == []
    assert session.state()["position"] == {"x": 0, "y": 0}
    assert ledger.total == 2 + 15 + 5
