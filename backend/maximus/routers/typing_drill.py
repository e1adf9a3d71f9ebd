from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..modules.base import RoundSession
from ..sessions import LearnerSession
from .common import get_learner, mount_round, round_payload, unmount

MODULE = "typing"

router = APIRouter(prefix="/learn/session/{session_id}/typing", tags=["typing"])


class SubmitRequest(BaseModel):
    typed: str = Field(default="", max_length=8000)
    # Milliseconds since the first keystroke, measured by the client
    elapsed_ms: Optional[int] = Field(default=None, ge=0)


@router.post("/mount")
async def mount(learner: LearnerSession = Depends(get_learner)):
    return await mount_round(learner, MODULE)


@router.delete("/mount")
async def unmount_typing(learner: LearnerSession = Depends(get_learner)):
    return await unmount(learner, MODULE)


@router.get("/state")
async def state(learner: LearnerSession = Depends(get_learner)):
    return learner.get(MODULE, RoundSession).state()


@router.post("/submit")
async def submit(req: SubmitRequest, learner: LearnerSession = Depends(get_learner)):
    session = learner.get(MODULE, RoundSession)
    elapsed = req.elapsed_ms / 1000 if req.elapsed_ms is not None else None
    result = await session.submit(req.typed, elapsed_seconds=elapsed)
    return round_payload(learner, session, result)
