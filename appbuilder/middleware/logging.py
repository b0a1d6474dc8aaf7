# appbuilder/middleware/logging.py
from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request

logger = logging.getLogger("appbuilder.requests")


def install_request_logging(app: FastAPI) -> None:
    @app.middleware("http")
    async def _log_requests(request: Request, call_next):
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            duration = (time.perf_counter() - start) * 1000.0
            logger.exception("%s %s failed (%.2f ms)", request.method, request.url.path, duration)
            raise
        duration = (time.perf_counter() - start) * 1000.0
        logger.info(
            "%s %s [%s] -> %s (%.2f ms)",
            request.method,
            request.url.path,
            request.url.scheme,
            response.status_code,
            duration,
        )
        return response
