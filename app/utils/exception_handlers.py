"""Centralized exception handlers for FastAPI application."""

import logging
from dataclasses import dataclass
from typing import Any, Callable

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.exceptions import (
    AuthenticationError,
    DatabaseConnectionError,
    DuplicateRecordError,
    InvalidFilterError,
    InvalidInputError,
    RecordNotFoundError,
    RelatedRecordNotFoundError,
)

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


@dataclass(frozen=True, slots=True)
class ExceptionConfig:
    """Configuration for exception handler behavior."""

    status_code: int
    log_level: str = "warning"
    include_detail: bool = True


# Exception type to configuration mapping
EXCEPTION_CONFIGS: dict[type[Exception], ExceptionConfig] = {
    RecordNotFoundError: ExceptionConfig(
        status_code=status.HTTP_404_NOT_FOUND,
        log_level="info",
    ),
    RelatedRecordNotFoundError: ExceptionConfig(
        status_code=status.HTTP_400_BAD_REQUEST,
    ),
    InvalidFilterError: ExceptionConfig(
        status_code=status.HTTP_400_BAD_REQUEST,
        log_level="error",
    ),
    DatabaseConnectionError: ExceptionConfig(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        log_level="error",
        include_detail=False,
    ),
    InvalidInputError: ExceptionConfig(
        status_code=status.HTTP_400_BAD_REQUEST,
        log_level="info",
    ),
    DuplicateRecordError: ExceptionConfig(
        status_code=status.HTTP_400_BAD_REQUEST,
        log_level="info",
    ),
    AuthenticationError: ExceptionConfig(
        status_code=status.HTTP_401_UNAUTHORIZED,
    ),
}


def _log_exception(exc: Exception, config: ExceptionConfig) -> None:
    """Log exception with appropriate level."""
    log_func: Callable[..., None] = getattr(logger, config.log_level)
    log_func(f"{type(exc).__name__}: {exc}")


def _build_response_content(exc: Exception, config: ExceptionConfig) -> dict[str, Any]:
    """Build response content based on exception type."""
    if not config.include_detail:
        return {"error": INTERNAL_ERROR_MESSAGE}

    # Not-found bodies name only the model so foreign ids stay hidden
    if isinstance(exc, RecordNotFoundError):
        return {"error": f"{exc.model_name} not found"}

    content: dict[str, Any] = {"error": str(exc)}
    if isinstance(exc, RelatedRecordNotFoundError):
        content["field"] = exc.field
    return content


def _create_handler(
    config: ExceptionConfig,
) -> Callable[[Request, Exception], JSONResponse]:
    """Create exception handler function for given config."""

    async def handler(request: Request, exc: Exception) -> JSONResponse:
        _log_exception(exc, config)
        content = _build_response_content(exc, config)
        return JSONResponse(status_code=config.status_code, content=content)

    return handler


def _describe_validation_error(error: dict[str, Any]) -> str:
    location = ".".join(
        str(part) for part in error.get("loc", ()) if part not in ("body", "query")
    )
    message = error.get("msg", "Invalid request data")
    return f"{location}: {message}" if location else message


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle request validation errors as 400 with the first problem named."""
    errors = exc.errors()
    logger.info(f"Validation error: {errors}")
    message = (
        _describe_validation_error(errors[0]) if errors else "Invalid request data"
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": message,
            "details": [
                {"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")}
                for e in errors
            ],
        },
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all unhandled exceptions."""
    logger.exception(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": INTERNAL_ERROR_MESSAGE},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI application.

    Args:
        app: FastAPI application instance.
    """
    # Register configured exception handlers
    for exc_type, config in EXCEPTION_CONFIGS.items():
        app.add_exception_handler(exc_type, _create_handler(config))

    # Register special handlers
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
