# appbuilder/middleware/https_redirect.py
from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from fastapi import FastAPI
from starlette.datastructures import URL
from starlette.middleware.httpsredirect import HTTPSRedirectMiddleware
from starlette.responses import RedirectResponse
from starlette.types import ASGIApp, Receive, Scope, Send

from appbuilder.config import settings

STATE_ATTR = "https_redirect_port"
_SCHEMES = {"http": "https", "ws": "wss"}


def add_https_redirection(app: FastAPI, *, port: Optional[int] = None) -> None:
    """
    Register the HTTPS port to redirect to. When neither `port` nor HTTPS_PORT
    is set, redirects keep the request host and use the default HTTPS port.
    """
    setattr(app.state, STATE_ATTR, port if port is not None else settings.https_redirect_port)


class HttpsPortRedirectMiddleware:
    """Like HTTPSRedirectMiddleware, but redirects to a fixed HTTPS port."""

    def __init__(self, app: ASGIApp, port: int) -> None:
        self.app = app
        self.port = port

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] in ("http", "websocket") and scope["scheme"] in _SCHEMES:
            url = URL(scope=scope)
            host = url.hostname or ""
            if ":" in host:
                host = f"[{host}]"
            netloc = host if self.port == 443 else f"{host}:{self.port}"
            target = url.replace(scheme=_SCHEMES[url.scheme], netloc=netloc)
            response = RedirectResponse(str(target), status_code=307)
            await response(scope, receive, send)
            return
        await self.app(scope, receive, send)


def https_redirection_stage(app: FastAPI) -> Tuple[type, Dict[str, Any]]:
    """Pick the redirect middleware for whatever port has been registered on `app`."""
    port = getattr(app.state, STATE_ATTR, None)
    if port is None:
        return HTTPSRedirectMiddleware, {}
    return HttpsPortRedirectMiddleware, {"port": port}
