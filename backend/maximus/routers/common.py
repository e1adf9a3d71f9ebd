from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

from fastapi import Depends

from ..modules.base import Notice, RoundResult, RoundSession
from ..sessions import LearnerSession, SessionRegistry, get_registry


def get_learner(session_id: str, registry: SessionRegistry = Depends(get_registry)) -> LearnerSession:
    return registry.get(session_id)


def notices_payload(notices: Iterable[Notice]) -> list[Dict[str, Any]]:
    return [n.model_dump() for n in notices]


def action_payload(learner: LearnerSession, state: Dict[str, Any], notices: Iterable[Notice] = (), **extra: Any) -> Dict[str, Any]:
    return {
        **extra,
        "state": state,
        "score": learner.ledger.snapshot().model_dump(),
        "notices": notices_payload(notices),
    }


def round_payload(learner: LearnerSession, session: RoundSession, result: Optional[RoundResult]) -> Dict[str, Any]:
    if result is None:
        # Empty submissions are ignored without touching the round
        return action_payload(learner, session.state(), accepted=False)
    evaluation = result.evaluation
    return action_payload(
        learner,
        session.state(),
        result.notices,
        accepted=True,
        reward=evaluation.reward,
        correct=evaluation.correct,
        feedback=evaluation.feedback,
        details=evaluation.details,
        previous_difficulty=result.previous_difficulty,
        difficulty=result.difficulty,
    )


async def mount_round(learner: LearnerSession, module: str) -> Dict[str, Any]:
    await learner.mount(module)
    session = learner.get(module, RoundSession)
    return action_payload(learner, session.state(), session.last_notices)


async def unmount(learner: LearnerSession, module: str) -> Dict[str, Any]:
    removed = await learner.unmount(module)
    return {"unmounted": removed, "score": learner.ledger.snapshot().model_dump()}
