from __future__ import annotations

from fastapi import APIRouter, Depends

from ..modules.base import RoundSession
from ..sessions import LearnerSession
from .common import get_learner, mount_round, round_payload, unmount

MODULE = "reading"

router = APIRouter(prefix="/learn/session/{session_id}/reading", tags=["reading"])


@router.post("/mount")
async def mount(learner: LearnerSession = Depends(get_learner)):
    return await mount_round(learner, MODULE)


@router.delete("/mount")
async def unmount_reading(learner: LearnerSession = Depends(get_learner)):
    return await unmount(learner, MODULE)


@router.get("/state")
async def state(learner: LearnerSession = Depends(get_learner)):
    return learner.get(MODULE, RoundSession).state()


@router.post("/next")
async def next_passage(learner: LearnerSession = Depends(get_learner)):
    """Finish the current passage and move on to the next story."""
    session = learner.get(MODULE, RoundSession)
    result = await session.submit("")
    return round_payload(learner, session, result)
