from __future__ import annotations

from typing import List, Tuple

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..modules.drawing import DrawingSession
from ..sessions import LearnerSession
from .common import action_payload, get_learner, unmount

MODULE = "draw"

router = APIRouter(prefix="/learn/session/{session_id}/draw", tags=["draw"])


class ColorRequest(BaseModel):
    color: str = Field(pattern=r"^#[0-9A-Fa-f]{6}$")


class BrushRequest(BaseModel):
    size: int


class PointRequest(BaseModel):
    x: float
    y: float


class MoveRequest(BaseModel):
    points: List[Tuple[float, float]] = Field(default_factory=list, max_length=2000)


def _drawing(learner: LearnerSession) -> DrawingSession:
    return learner.get(MODULE, DrawingSession)


@router.post("/mount")
async def mount(learner: LearnerSession = Depends(get_learner)):
    session = await learner.mount(MODULE)
    return action_payload(learner, session.state())


@router.delete("/mount")
async def unmount_draw(learner: LearnerSession = Depends(get_learner)):
    return await unmount(learner, MODULE)


@router.get("/state")
async def state(learner: LearnerSession = Depends(get_learner)):
    return _drawing(learner).state()


@router.post("/color")
async def select_color(req: ColorRequest, learner: LearnerSession = Depends(get_learner)):
    session = _drawing(learner)
    notices = session.select_color(req.color)
    return action_payload(learner, session.state(), notices)


@router.post("/brush")
async def select_brush(req: BrushRequest, learner: LearnerSession = Depends(get_learner)):
    session = _drawing(learner)
    notices = session.select_brush(req.size)
    return action_payload(learner, session.state(), notices)


@router.post("/clear")
async def clear(learner: LearnerSession = Depends(get_learner)):
    session = _drawing(learner)
    notices = session.clear()
    return action_payload(learner, session.state(), notices)


@router.post("/save")
async def save(learner: LearnerSession = Depends(get_learner)):
    session = _drawing(learner)
    saved = session.save()
    return action_payload(
        learner,
        session.state(),
        saved["notices"],
        filename=saved["filename"],
        data_url=saved["data_url"],
    )


@router.post("/stroke/start")
async def stroke_start(req: PointRequest, learner: LearnerSession = Depends(get_learner)):
    session = _drawing(learner)
    notices = session.stroke_start((req.x, req.y))
    return action_payload(learner, session.state(), notices)


@router.post("/stroke/move")
async def stroke_move(req: MoveRequest, learner: LearnerSession = Depends(get_learner)):
    session = _drawing(learner)
    segments = session.stroke_move(req.points)
    return action_payload(learner, session.state(), segments=segments)


@router.post("/stroke/end")
async def stroke_end(learner: LearnerSession = Depends(get_learner)):
    session = _drawing(learner)
    notices = await session.stroke_end()
    return action_payload(learner, session.state(), notices)
