from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends

from ..constants import ALL_MODULES, APP_NAME
from ..sessions import LearnerSession, SessionRegistry, get_registry
from .common import get_learner

router = APIRouter(tags=["learn"])


@router.get("/modules")
async def list_modules() -> Dict[str, Any]:
    return {"app": APP_NAME, "modules": [m.model_dump() for m in ALL_MODULES]}


@router.post("/learn/session", status_code=201)
async def open_session(registry: SessionRegistry = Depends(get_registry)):
    learner = registry.open()
    return {"session_id": learner.session_id, "score": learner.ledger.snapshot().model_dump()}


@router.get("/learn/session/{session_id}")
async def get_session(learner: LearnerSession = Depends(get_learner)):
    return {
        "session_id": learner.session_id,
        "score": learner.ledger.snapshot().model_dump(),
        "modules": sorted(learner.modules),
    }


@router.get("/learn/session/{session_id}/score")
async def get_score(learner: LearnerSession = Depends(get_learner)):
    return learner.ledger.snapshot().model_dump()


@router.delete("/learn/session/{session_id}")
async def close_session(session_id: str, registry: SessionRegistry = Depends(get_registry)):
    learner = registry.get(session_id)
    total = learner.ledger.total
    await registry.close(session_id)
    return {"closed": True, "total": total}
