# appbuilder/routers/health_router.py
from __future__ import annotations

from fastapi import APIRouter, Request

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health(request: Request):
    return {"status": "ok", "pipeline": list(getattr(request.app.state, "pipeline_stages", ()))}
