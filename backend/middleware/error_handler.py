"""Standard error handler: one JSON error envelope for every failure."""

from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..auth.errors import IdentityError
from ..utils.logging import get_logger

logger = get_logger("middleware.error_handler")


def _error_response(
    request: Request,
    status_code: int,
    detail: Any,
    code: Optional[str] = None,
    **extra: Any,
) -> JSONResponse:
    content = {
        "error": True,
        "status_code": status_code,
        "code": code,
        "detail": detail,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "request_id": getattr(request.state, "request_id", None),
    }
    content.update(extra)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content))


def register_error_handlers(app: FastAPI) -> None:
    """Register standard error handlers on the app."""

    @app.exception_handler(IdentityError)
    async def identity_exception_handler(request: Request, exc: IdentityError):
        logger.info(
            "identity_error",
            code=exc.code,
            path=str(request.url.path),
        )
        return _error_response(request, exc.status_code, exc.message, code=exc.code)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _error_response(request, exc.status_code, exc.detail, code="http_error")

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return _error_response(
            request,
            422,
            "Validation error",
            code="validation_error",
            errors=exc.errors(),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(
            "unhandled_exception",
            error=str(exc),
            request_id=getattr(request.state, "request_id", None),
            path=str(request.url.path),
            exc_info=True,
        )
        return _error_response(request, 500, "Internal server error", code="internal_error")
