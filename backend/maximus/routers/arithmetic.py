from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..modules.base import RoundSession
from ..sessions import LearnerSession
from .common import get_learner, mount_round, round_payload, unmount

MODULE = "math"

router = APIRouter(prefix="/learn/session/{session_id}/math", tags=["math"])


class AnswerRequest(BaseModel):
    answer: str = Field(default="", max_length=32)


@router.post("/mount")
async def mount(learner: LearnerSession = Depends(get_learner)):
    return await mount_round(learner, MODULE)


@router.delete("/mount")
async def unmount_math(learner: LearnerSession = Depends(get_learner)):
    return await unmount(learner, MODULE)


@router.get("/state")
async def state(learner: LearnerSession = Depends(get_learner)):
    return learner.get(MODULE, RoundSession).state()


@router.post("/answer")
async def answer(req: AnswerRequest, learner: LearnerSession = Depends(get_learner)):
    session = learner.get(MODULE, RoundSession)
    result = await session.submit(req.answer)
    return round_payload(learner, session, result)
