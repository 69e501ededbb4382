import logging
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from maintrack.utils.exceptions import AppException, ErrorCode

logger = logging.getLogger(__name__)


def _error_response(status_code: int, message: str, code: str,
                    details: list | None = None, field: str | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "message": message,
            "error": {"code": code, "details": details, "field": field},
        },
    )


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    error = exc.detail["error"]
    return _error_response(exc.status_code, exc.message, error["code"], error["details"], error["field"])


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Request body / query failed pydantic validation: one detail per offending field."""
    details = [
        {
            # loc looks like ("body", "currentKm") or ("query", "month")
            "field": ".".join(str(part) for part in e.get("loc", ()) if part not in ("body", "query", "path"))
                     or "unknown",
            "message": e.get("msg", "Invalid value"),
        }
        for e in exc.errors()
    ]
    return _error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, "Validation error. Please check your input.",
                           ErrorCode.VALIDATION_ERROR, details)


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """A unique or foreign key constraint rejected the write."""
    logger.warning(f"IntegrityError on {request.method} {request.url.path}: {exc.orig}")
    return _error_response(status.HTTP_409_CONFLICT, "The record conflicts with existing data.",
                           ErrorCode.DUPLICATE_ENTRY)


async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Unreachable database or rejected statement. Not retried here."""
    logger.error(f"Store failure on {request.method} {request.url.path}: {exc}")
    return _error_response(status.HTTP_503_SERVICE_UNAVAILABLE,
                           "The data store is unavailable. Please try again later.",
                           ErrorCode.DEPENDENCY_FAILURE)


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled exception on {request.method} {request.url.path}")
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR,
                           "An unexpected error occurred. Please try again later.",
                           ErrorCode.INTERNAL_SERVER_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
