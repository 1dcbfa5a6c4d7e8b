from collections.abc import Mapping, Sequence
from typing import Any, cast
from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_422_UNPROCESSABLE_CONTENT,
    HTTP_500_INTERNAL_SERVER_ERROR,
)
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from catalog.api.templates import templates
from catalog.core.logging import get_logger


class ErrorBody(BaseModel):
    """Structured error body."""
    type: str
    message: str
    details: dict[str, object] | None = None


class ErrorEnvelope(BaseModel):
    error: ErrorBody
    meta: dict[str, object]


def _build_meta(request: Request) -> dict[str, object]:
    """Collect metadata for error pages."""
    return {
        "request_id": getattr(request.state, "correlation_id", "-"),
        "path": request.url.path,
        "method": request.method,
    }

def _serialize_validation_errors(errors: Sequence[Mapping[Any, Any]]) -> list[dict[str, object]]:
    """Serialize validation errors, handling non-serializable objects in context."""

    serialized_errors: list[dict[str, object]] = []

    for error in errors:
        serialized_error: dict[str, object] = dict(error)

        if "ctx" in serialized_error and isinstance(serialized_error["ctx"], dict):
            ctx: dict[str, object] = cast(dict[str, object], serialized_error["ctx"]).copy()

            if "error" in ctx:
                ctx["error"] = str(ctx["error"])
            serialized_error["ctx"] = ctx
        serialized_errors.append(serialized_error)
    return serialized_errors


def classify_integrity_error(exc: IntegrityError) -> tuple[str, str]:
    """Map a constraint violation to (type, message)."""
    error_message = str(exc.orig) if exc.orig else str(exc)
    lowered = error_message.lower()

    if "foreign key constraint" in lowered:
        return "reference_conflict", "Referenced resource conflict"
    if "unique constraint" in lowered:
        return "duplicate_resource", "Resource already exists"
    if "not null constraint" in lowered or "check constraint" in lowered:
        return "invalid_value", "Invalid data value"
    return "integrity_error", "Data integrity violation"


def render_error(request: Request, status_code: int, body: ErrorBody) -> HTMLResponse:
    envelope = ErrorEnvelope(error=body, meta=_build_meta(request))
    return templates.TemplateResponse(
        request,
        "error.html",
        {
            "title": body.message,
            "status_code": status_code,
            "error": envelope.error,
            "meta": envelope.meta,
        },
        status_code=status_code,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register centralized exception."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> HTMLResponse:
        logger = get_logger(__name__, request)
        logger.warning("HTTP error %s: %s", exc.status_code, exc.detail)
        return render_error(
            request,
            exc.status_code,
            ErrorBody(type="http_error", message=exc.detail or "HTTP error"),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> HTMLResponse:
        logger = get_logger(__name__, request)
        logger.info("Validation error")
        return render_error(
            request,
            HTTP_422_UNPROCESSABLE_CONTENT,
            ErrorBody(
                type="validation_error",
                message="Invalid request payload",
                details={"errors": _serialize_validation_errors(exc.errors())},
            ),
        )

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError) -> HTMLResponse:
        logger = get_logger(__name__, request)
        logger.warning("Database integrity error: %s", exc)
        error_type, message = classify_integrity_error(exc)
        return render_error(
            request, HTTP_400_BAD_REQUEST, ErrorBody(type=error_type, message=message)
        )

    @app.exception_handler(SQLAlchemyError)
    async def store_error_handler(request: Request, exc: SQLAlchemyError) -> HTMLResponse:
        logger = get_logger(__name__, request)
        logger.exception("Store error", exc_info=exc)
        return render_error(
            request,
            HTTP_500_INTERNAL_SERVER_ERROR,
            ErrorBody(type="store_error", message="Internal Server Error"),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> HTMLResponse:
        logger = get_logger(__name__, request)
        logger.exception("Unhandled server error", exc_info=exc)
        return render_error(
            request,
            HTTP_500_INTERNAL_SERVER_ERROR,
            ErrorBody(type="server_error", message="Internal Server Error"),
        )
