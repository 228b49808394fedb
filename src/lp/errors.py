"""Error taxonomy shared by services and routes."""

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from lp.validation import FieldErrors, issues_from_pydantic

logger = logging.getLogger(__name__)


class LPError(Exception):
    """Base class for errors rendered as ``{"error": ..., "issues": ...}``."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Unknown error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_body(self) -> Dict[str, Any]:
        return {"error": self.message}


class ValidationFailed(LPError):
    """Payload failed schema validation."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"

    def __init__(self, issues: FieldErrors, message: Optional[str] = None):
        super().__init__(message)
        self.issues = issues

    def to_body(self) -> Dict[str, Any]:
        return {"error": self.message, "issues": self.issues}


class AuthenticationRequired(LPError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class Forbidden(LPError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFound(LPError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ReferentialIntegrityFailure(LPError):
    """A referenced parent is missing or the store rejected the write."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Referenced document does not exist"


class InternalError(LPError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Unknown error"


async def lp_error_handler(request: Request, exc: LPError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Request %s failed: %s", request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render FastAPI request validation errors with the same shape as ours."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "Validation failed",
            "issues": issues_from_pydantic(exc.errors(), strip=("body", "query", "path")),
        },
    )


async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Unknown routes, wrong methods and other framework-raised errors."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Store error on %s", request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=InternalError().to_body(),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled %s on %s", type(exc).__name__, request.url.path, exc_info=exc
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=InternalError().to_body(),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(LPError, lp_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
