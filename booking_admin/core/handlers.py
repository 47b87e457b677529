"""
Exception handlers rendering application errors as JSON responses.
"""
from __future__ import annotations

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from booking_admin.config.logging import get_logger
from booking_admin.core.exceptions import BaseAppException, DatabaseError, ErrorCode

logger = get_logger(__name__)


async def app_exception_handler(request: Request, exc: BaseAppException) -> JSONResponse:
    request_id = getattr(request.state, "request_id", None)
    if exc.status_code >= 500:
        logger.error(
            f"{exc.__class__.__name__}: {exc.message}",
            extra={"request_id": request_id, "path": request.url.path, "details": exc.details},
        )
    else:
        logger.info(
            f"{exc.__class__.__name__}: {exc.message}",
            extra={"request_id": request_id, "path": request.url.path},
        )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    field_errors = {}
    messages = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc) or "request"
        field_errors.setdefault(field, []).append(error.get("msg", "Invalid value"))
        messages.append(f"{field}: {error.get('msg', 'Invalid value')}")

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": {
                "message": "Validation failed",
                "code": ErrorCode.VALIDATION_ERROR.value,
                "details": {"field_errors": field_errors},
                "type": "RequestValidationError",
            },
            "message": messages,
        },
    )


async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(
        f"Unhandled database error: {exc}",
        extra={"request_id": getattr(request.state, "request_id", None), "path": request.url.path},
        exc_info=exc,
    )
    error = DatabaseError()
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the JSON error handlers to the application"""
    app.add_exception_handler(BaseAppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
