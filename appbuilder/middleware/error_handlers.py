# appbuilder/middleware/error_handlers.py
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("appbuilder.errors")


def add_error_handlers(app: FastAPI) -> None:
    """
    JSON bodies for HTTP and validation errors. Unhandled exceptions get a
    generic 500 unless the developer exception page is in the pipeline, which
    renders them first.
    """

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail, "status_code": exc.status_code},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.debug("Validation error on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=422, content={"detail": exc.errors(), "status_code": 422})

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"detail": "Internal Server Error", "status_code": 500})
