from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..modules.coding import CodingSession
from ..sessions import LearnerSession
from .common import action_payload, get_learner, unmount

MODULE = "coding"

router = APIRouter(prefix="/learn/session/{session_id}/coding", tags=["coding"])


class BlockRequest(BaseModel):
    block_id: str


@router.post("/mount")
async def mount(learner: LearnerSession = Depends(get_learner)):
    session = await learner.mount(MODULE)
    return action_payload(learner, session.state())


@router.delete("/mount")
async def unmount_coding(learner: LearnerSession = Depends(get_learner)):
    return await unmount(learner, MODULE)


@router.get("/state")
async def state(learner: LearnerSession = Depends(get_learner)):
    return learner.get(MODULE, CodingSession).state()


@router.post("/blocks")
async def add_block(req: BlockRequest, learner: LearnerSession = Depends(get_learner)):
    session = learner.get(MODULE, CodingSession)
    notices = session.add_block(req.block_id)
    return action_payload(learner, session.state(), notices)


@router.post("/run")
async def run(learner: LearnerSession = Depends(get_learner)):
    session = learner.get(MODULE, CodingSession)
    reward, notices = session.run()
    return action_payload(learner, session.state(), notices, reward=reward)


@router.post("/clear")
async def clear(learner: LearnerSession = Depends(get_learner)):
    session = learner.get(MODULE, CodingSession)
    notices = session.clear()
    return action_payload(learner, session.state(), notices)
