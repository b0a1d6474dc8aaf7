# appbuilder/middleware/hsts.py
from __future__ import annotations

from typing import Iterable, List, Optional

from fastapi import FastAPI, Request
from pydantic import BaseModel, Field
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

from appbuilder.config import settings

HEADER_NAME = "Strict-Transport-Security"
STATE_ATTR = "hsts_options"


class HstsOptions(BaseModel):
    max_age: int = Field(default_factory=lambda: settings.hsts_max_age, ge=0)
    include_subdomains: bool = Field(default_factory=lambda: settings.hsts_include_subdomains)
    preload: bool = Field(default_factory=lambda: settings.hsts_preload)
    excluded_hosts: List[str] = Field(default_factory=lambda: ["localhost", "127.0.0.1", "[::1]"])

    def header_value(self) -> str:
        value = f"max-age={self.max_age}"
        if self.include_subdomains:
            value += "; includeSubDomains"
        if self.preload:
            value += "; preload"
        return value


def add_hsts(
    app: FastAPI,
    *,
    max_age: Optional[int] = None,
    include_subdomains: Optional[bool] = None,
    preload: Optional[bool] = None,
    excluded_hosts: Optional[Iterable[str]] = None,
) -> None:
    """Register HSTS options; unset arguments fall back to Settings."""
    overrides = {
        "max_age": max_age,
        "include_subdomains": include_subdomains,
        "preload": preload,
        "excluded_hosts": list(excluded_hosts) if excluded_hosts is not None else None,
    }
    setattr(app.state, STATE_ATTR, HstsOptions(**{k: v for k, v in overrides.items() if v is not None}))


def get_hsts_options(app: FastAPI) -> HstsOptions:
    return getattr(app.state, STATE_ATTR, None) or HstsOptions()


def _normalize_host(host: str) -> str:
    return host.strip().strip("[]").lower()


class HstsMiddleware(BaseHTTPMiddleware):
    """Adds Strict-Transport-Security to HTTPS responses for non-excluded hosts."""

    def __init__(self, app: ASGIApp, options: Optional[HstsOptions] = None) -> None:
        super().__init__(app)
        self.options = options or HstsOptions()
        self._header = self.options.header_value()
        self._excluded = {_normalize_host(h) for h in self.options.excluded_hosts}

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        if request.url.scheme != "https":
            return response
        if _normalize_host(request.url.hostname or "") in self._excluded:
            return response
        response.headers[HEADER_NAME] = self._header
        return response
