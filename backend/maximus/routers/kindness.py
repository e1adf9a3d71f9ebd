from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..modules.base import RoundSession
from ..sessions import LearnerSession
from .common import action_payload, get_learner, mount_round, round_payload, unmount

MODULE = "kindness"

router = APIRouter(prefix="/learn/session/{session_id}/kindness", tags=["kindness"])


class ChooseRequest(BaseModel):
    choice: str = Field(default="", max_length=1)


@router.post("/mount")
async def mount(learner: LearnerSession = Depends(get_learner)):
    return await mount_round(learner, MODULE)


@router.delete("/mount")
async def unmount_kindness(learner: LearnerSession = Depends(get_learner)):
    return await unmount(learner, MODULE)


@router.get("/state")
async def state(learner: LearnerSession = Depends(get_learner)):
    return learner.get(MODULE, RoundSession).state()


@router.post("/choose")
async def choose(req: ChooseRequest, learner: LearnerSession = Depends(get_learner)):
    session = learner.get(MODULE, RoundSession)
    result = await session.submit(req.choice)
    return round_payload(learner, session, result)


@router.post("/retry")
async def retry(learner: LearnerSession = Depends(get_learner)):
    session = learner.get(MODULE, RoundSession)
    retried = await session.retry()
    return action_payload(learner, session.state(), session.last_notices, retried=retried)
