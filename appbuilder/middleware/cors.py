# appbuilder/middleware/cors.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from fastapi import FastAPI
from pydantic import BaseModel, Field

from appbuilder.config import settings

logger = logging.getLogger("appbuilder.cors")

STATE_ATTR = "cors_policy"


class CorsPolicy(BaseModel):
    # Empty policy: CORSMiddleware runs but allows no cross-origin requests
    allow_origins: List[str] = []
    allow_methods: List[str] = ["GET"]
    allow_headers: List[str] = []
    allow_credentials: bool = False
    expose_headers: List[str] = []
    max_age: int = Field(default=600, ge=0)

    def middleware_options(self) -> Dict[str, Any]:
        return self.model_dump()


def add_cors_policy(
    app: FastAPI,
    *,
    allow_origins: Optional[Sequence[str]] = None,
    allow_methods: Sequence[str] = ("*",),
    allow_headers: Sequence[str] = ("*",),
    allow_credentials: Optional[bool] = None,
    expose_headers: Sequence[str] = (),
    max_age: int = 600,
) -> None:
    """Register the CORS policy that use_cors_policy() will enforce."""
    policy = CorsPolicy(
        allow_origins=list(allow_origins) if allow_origins is not None else settings.cors_allow_origins,
        allow_methods=list(allow_methods),
        allow_headers=list(allow_headers),
        allow_credentials=settings.cors_allow_credentials if allow_credentials is None else allow_credentials,
        expose_headers=list(expose_headers),
        max_age=max_age,
    )
    setattr(app.state, STATE_ATTR, policy)
    logger.debug("CORS policy registered: origins=%s", policy.allow_origins)


def get_cors_policy(app: FastAPI) -> CorsPolicy:
    policy = getattr(app.state, STATE_ATTR, None)
    if policy is None:
        logger.warning("No CORS policy registered; cross-origin requests will be rejected")
        return CorsPolicy()
    return policy
