"""
Global error handler middleware for the FastAPI application.
Catches uncaught exceptions and turns failed use case results into HTTP errors.
"""

import logging
import traceback
from typing import Any, Dict, NoReturn
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from fastapi import HTTPException, status

from hourbook.application.use_cases.base_use_case import GENERIC_ERROR_MESSAGE, UseCaseResult
from hourbook.config import settings

logger = logging.getLogger(__name__)


ERROR_STATUS = {
    "VALIDATION_ERROR": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "BUSINESS_RULE_VIOLATION": status.HTTP_409_CONFLICT,
    "ENTITY_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "AUTHENTICATION_ERROR": status.HTTP_401_UNAUTHORIZED,
    "AUTHORIZATION_ERROR": status.HTTP_403_FORBIDDEN,
    "STORE_ERROR": status.HTTP_503_SERVICE_UNAVAILABLE,
    "INVOICE_DELIVERY_ERROR": status.HTTP_502_BAD_GATEWAY,
}


def raise_for_result(result: UseCaseResult) -> NoReturn:
    """
    Raise the HTTPException matching a failed use case result.
    The detail always carries the user-facing message; field and redirect_to are added when known.
    """
    status_code = ERROR_STATUS.get(result.error_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
    metadata = result.metadata or {}

    detail: Dict[str, Any] = {
        "message": result.error or GENERIC_ERROR_MESSAGE,
        "code": result.error_code,
    }
    for key in ("field", "redirect_to", "kind"):
        if metadata.get(key):
            detail[key] = metadata[key]

    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    raise HTTPException(status_code=status_code, detail=detail, headers=headers)


def unwrap(result: UseCaseResult) -> Any:
    """Data of a successful result; anything else becomes an HTTP error."""
    if not result.success:
        raise_for_result(result)
    return result.data


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Middleware to handle all uncaught exceptions and format error responses.
    """

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            return await self.handle_exception(request, exc)

    async def handle_exception(self, request: Request, exc: Exception) -> JSONResponse:
        # Log the full exception with traceback
        logger.error(
            f"Unhandled exception: {type(exc).__name__}: {str(exc)}",
            exc_info=True,
            extra={
                "request_path": request.url.path,
                "request_method": request.method,
                "client_host": request.client.host if request.client else None
            }
        )

        error_response: Dict[str, Any] = {
            "error": "Internal Server Error",
            "message": GENERIC_ERROR_MESSAGE,
            "status_code": status.HTTP_500_INTERNAL_SERVER_ERROR
        }

        if settings.debug:
            error_response["debug"] = {
                "exception_type": type(exc).__name__,
                "traceback": traceback.format_exc().split("\n")
            }

        return JSONResponse(
            status_code=error_response["status_code"],
            content=error_response
        )
