# appbuilder/middleware/auth.py
from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from fastapi import FastAPI
from pydantic import BaseModel
from starlette.authentication import (
    AuthCredentials,
    AuthenticationBackend,
    AuthenticationError,
    BaseUser,
    UnauthenticatedUser,
)
from starlette.requests import HTTPConnection
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp, Receive, Scope, Send
from starlette.websockets import WebSocketClose

from appbuilder.errors import PipelineError

logger = logging.getLogger("appbuilder.auth")

BACKEND_STATE_ATTR = "authentication_backend"
POLICY_STATE_ATTR = "authorization_policy"


class AnonymousBackend(AuthenticationBackend):
    """Used when no backend was registered: every connection is anonymous."""

    async def authenticate(self, conn: HTTPConnection) -> Optional[Tuple[AuthCredentials, BaseUser]]:
        return None


class AuthorizationPolicy(BaseModel):
    """Default policy allows everything."""

    require_authenticated: bool = False
    required_scopes: List[str] = []
    exempt_paths: List[str] = []

    def is_exempt(self, path: str) -> bool:
        return any(path.startswith(p) for p in self.exempt_paths)


def add_authentication(app: FastAPI, backend: AuthenticationBackend) -> None:
    setattr(app.state, BACKEND_STATE_ATTR, backend)


def add_authorization(app: FastAPI, policy: Optional[AuthorizationPolicy] = None) -> None:
    setattr(app.state, POLICY_STATE_ATTR, policy or AuthorizationPolicy())


def get_authentication_backend(app: FastAPI) -> AuthenticationBackend:
    backend = getattr(app.state, BACKEND_STATE_ATTR, None)
    if backend is None:
        logger.debug("No authentication backend registered; requests will be anonymous")
        return AnonymousBackend()
    return backend


def get_authorization_policy(app: FastAPI) -> AuthorizationPolicy:
    return getattr(app.state, POLICY_STATE_ATTR, None) or AuthorizationPolicy()


def on_auth_error(conn: HTTPConnection, exc: AuthenticationError) -> Response:
    return JSONResponse(status_code=401, content={"detail": str(exc) or "Unauthorized", "status_code": 401})


class AuthorizationMiddleware:
    """
    Enforces an AuthorizationPolicy against the user and credentials that
    AuthenticationMiddleware placed on the scope, so it must run after it.
    """

    def __init__(self, app: ASGIApp, policy: Optional[AuthorizationPolicy] = None) -> None:
        self.app = app
        self.policy = policy or AuthorizationPolicy()

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] not in ("http", "websocket"):
            await self.app(scope, receive, send)
            return

        if "user" not in scope:
            raise PipelineError("AuthorizationMiddleware requires AuthenticationMiddleware earlier in the pipeline")

        path = scope.get("path", "")
        if not self.policy.is_exempt(path):
            status = self._check(scope)
            if status is not None:
                logger.info("Authorization denied (%s) for %s", status, path)
                await self._deny(status, scope, receive, send)
                return

        await self.app(scope, receive, send)

    def _check(self, scope: Scope) -> Optional[int]:
        user: BaseUser = scope.get("user") or UnauthenticatedUser()
        if self.policy.require_authenticated and not user.is_authenticated:
            return 401
        credentials: Optional[AuthCredentials] = scope.get("auth")
        granted = set(credentials.scopes) if credentials is not None else set()
        if any(s not in granted for s in self.policy.required_scopes):
            return 401 if not user.is_authenticated else 403
        return None

    async def _deny(self, status: int, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "websocket":
            await WebSocketClose(code=1008)(scope, receive, send)
            return
        detail = "Unauthorized" if status == 401 else "Forbidden"
        response = JSONResponse(status_code=status, content={"detail": detail, "status_code": status})
        await response(scope, receive, send)
