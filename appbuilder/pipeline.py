# appbuilder/pipeline.py
from __future__ import annotations

import logging
from typing import Any, List, Tuple

from starlette.applications import Starlette
from starlette.middleware import Middleware

from appbuilder.errors import PipelineError

logger = logging.getLogger("appbuilder.pipeline")

# Stage names
HSTS = "hsts"
HTTPS_REDIRECTION = "https_redirection"
AUTHENTICATION = "authentication"
AUTHORIZATION = "authorization"
CORS = "cors"
DEVELOPER_EXCEPTION_PAGE = "developer_exception_page"


class PipelineBuilder:
    """
    Ordered, append-only view over an application's user middleware.

    Stages run in append order: the first stage appended is the outermost
    one and sees the request first. Appending the same stage twice installs
    it twice.
    """

    def __init__(self, app: Starlette):
        self.app = app
        self._names: List[str] = []

    @property
    def stages(self) -> Tuple[str, ...]:
        return tuple(self._names)

    def use(self, middleware_cls: type, *, name: str, **options: Any) -> "PipelineBuilder":
        if getattr(self.app, "middleware_stack", None) is not None:
            raise PipelineError(
                f"Cannot add stage '{name}' after the application has started"
            )
        # Starlette's add_middleware prepends; appending keeps request order == append order
        self.app.user_middleware.append(Middleware(middleware_cls, **options))
        self._names.append(name)
        logger.debug("Pipeline stage #%d '%s' -> %s", len(self._names), name, middleware_cls.__name__)
        return self

    def __len__(self) -> int:
        return len(self._names)

    def __repr__(self) -> str:
        return f"PipelineBuilder(stages={list(self._names)!r})"
