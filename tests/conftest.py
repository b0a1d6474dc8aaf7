# tests/conftest.py
from __future__ import annotations

import logging
from typing import Callable, List, Optional, Tuple

import pytest
from fastapi import FastAPI, Request
from starlette.authentication import (
    AuthCredentials,
    AuthenticationBackend,
    AuthenticationError,
    BaseUser,
    SimpleUser,
)
from starlette.requests import HTTPConnection

from appbuilder.config import Configuration
from appbuilder.pipeline import PipelineBuilder


class TokenBackend(AuthenticationBackend):
    """Bearer tokens: "good" -> alice with the read scope, "admin" -> root with read+admin."""

    TOKENS = {
        "good": ("alice", ["authenticated", "read"]),
        "admin": ("root", ["authenticated", "read", "admin"]),
    }

    async def authenticate(self, conn: HTTPConnection) -> Optional[Tuple[AuthCredentials, BaseUser]]:
        header = conn.headers.get("Authorization")
        if not header:
            return None
        scheme, _, token = header.partition(" ")
        if scheme.lower() != "bearer" or token not in self.TOKENS:
            raise AuthenticationError("invalid token")
        name, scopes = self.TOKENS[token]
        return AuthCredentials(scopes), SimpleUser(name)


def build_app() -> FastAPI:
    app = FastAPI()

    @app.get("/ok")
    async def ok():
        return {"ok": True}

    @app.get("/boom")
    async def boom():
        raise RuntimeError("kaboom")

    @app.get("/whoami")
    async def whoami(request: Request):
        user = request.user
        return {"user": user.display_name if user.is_authenticated else None}

    @app.get("/public/info")
    async def public_info():
        return {"public": True}

    return app


@pytest.fixture
def app() -> FastAPI:
    return build_app()


@pytest.fixture
def builder(app: FastAPI) -> PipelineBuilder:
    return PipelineBuilder(app)


@pytest.fixture
def config_factory() -> Callable[..., Configuration]:
    def _make(**values) -> Configuration:
        return Configuration(values)

    return _make


@pytest.fixture
def stage_classes() -> Callable[[FastAPI], List[type]]:
    def _classes(app: FastAPI) -> List[type]:
        return [m.cls for m in app.user_middleware]

    return _classes


@pytest.fixture(autouse=True)
def appbuilder_logs_propagate():
    """setup_logging() stops the package logger propagating; caplog listens on the root."""
    package_logger = logging.getLogger("appbuilder")
    package_logger.propagate = True
    yield
    package_logger.propagate = True
