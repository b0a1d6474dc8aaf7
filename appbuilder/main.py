# appbuilder/main.py
from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from starlette.authentication import AuthenticationBackend

from appbuilder.config import Configuration, settings
from appbuilder.extensions import (
    configure_developer_exception_page,
    configure_hsts_and_redirection,
    use_authz,
    use_cors_policy,
)
from appbuilder.logging_conf import setup_logging
from appbuilder.middleware import (
    AuthorizationPolicy,
    add_authentication,
    add_authorization,
    add_cors_policy,
    add_error_handlers,
    add_hsts,
    add_https_redirection,
    install_request_logging,
)
from appbuilder.pipeline import PipelineBuilder
from appbuilder.routers import health_router

logger = logging.getLogger("appbuilder")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Logging first
    setup_logging()
    logger.info("Starting %s with pipeline %s", settings.app_name, list(app.state.pipeline_stages))
    yield
    logger.info("Shutdown complete")


def create_app(
    configuration: Optional[Configuration] = None,
    *,
    auth_backend: Optional[AuthenticationBackend] = None,
    authorization_policy: Optional[AuthorizationPolicy] = None,
) -> FastAPI:
    """
    Build the service. Configuration errors (missing or unknown Environment)
    propagate so a misconfigured deployment never starts.
    """
    configuration = configuration if configuration is not None else Configuration.from_env()
    app = FastAPI(title=settings.app_name, lifespan=lifespan)

    # Services
    add_hsts(app)
    add_https_redirection(app)
    add_cors_policy(app)
    if auth_backend is not None:
        add_authentication(app, auth_backend)
    add_authorization(app, authorization_policy)

    # Pipeline
    builder = PipelineBuilder(app)
    configure_developer_exception_page(builder, configuration)
    configure_hsts_and_redirection(builder, configuration)
    use_authz(builder)
    use_cors_policy(builder)
    app.state.pipeline_stages = builder.stages

    install_request_logging(app)
    add_error_handlers(app)

    app.include_router(health_router)

    @app.get("/")
    async def root():
        return {"name": settings.app_name, "status": "ok", "docs": "/docs"}

    return app


if __name__ == "__main__":
    import uvicorn

    reload_flag = os.getenv("RELOAD", "0") in ("1", "true", "True")
    uvicorn.run(
        "appbuilder.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=reload_flag,
        log_level="info",
    )
