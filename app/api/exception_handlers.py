from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("app.errors")


def register_exception_handlers(app: FastAPI) -> None:
    """Give framework-level errors the same `{"message": ...}` body as the prompt functions."""

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(
        request: Request,
        exc: StarletteHTTPException,
    ) -> JSONResponse:
        logger.info(
            "HTTP error",
            extra={
                "request_id": getattr(request.state, "request_id", None),
                "http_method": request.method,
                "status_code": exc.status_code,
                "error": "http_error",
            },
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        first_error = exc.errors()[0]["msg"] if exc.errors() else "Invalid request"
        logger.info(
            "Request validation failed",
            extra={
                "request_id": getattr(request.state, "request_id", None),
                "http_method": request.method,
                "status_code": 400,
                "error": "request_validation",
            },
        )
        return JSONResponse(status_code=400, content={"message": first_error})
