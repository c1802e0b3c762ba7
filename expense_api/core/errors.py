"""Error taxonomy and exception handlers.

Validation and not-found failures are raised by the router and rendered as
``{"error": {"message": ...}}``. Anything else that escapes a handler reaches
the boundary handler built by ``make_server_error_handler``.
"""

from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette import status
import logging

logger = logging.getLogger("expense_api.errors")

SERVER_ERROR_MESSAGE = "server error"


class ExpenseServiceError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ExpenseServiceError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(ExpenseServiceError):
    status_code = status.HTTP_404_NOT_FOUND


class StoreError(ExpenseServiceError):
    """Connection or query failure in the relational store."""


def error_body(message: str) -> dict:
    return {"error": {"message": message}}


def expense_error_handler(request: Request, exc: ExpenseServiceError):  # type: ignore
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))


def http_error_handler(request: Request, exc):  # type: ignore
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        message = f"No route for {request.method} {request.url.path}"
    else:
        message = str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(message),
        headers=getattr(exc, "headers", None),
    )


def validation_error_handler(request: Request, exc: RequestValidationError):  # type: ignore
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        message = f"Invalid {location}: {first.get('msg')}"
    else:
        message = "Invalid request"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(message),
    )


def make_server_error_handler(expose_details: bool):
    """Build the boundary handler turning unhandled failures into a 500.

    expose_details: include the raw error message and type in the body. Must be
    False in production so internals never leak to clients.
    """

    def server_error_handler(request: Request, exc: Exception):  # type: ignore
        logger.error(
            "unhandled exception on %s %s",
            request.method,
            request.url.path,
            exc_info=exc,
        )
        if expose_details:
            content = {
                "message": str(exc),
                "error": {"type": exc.__class__.__name__, "detail": repr(exc)},
            }
        else:
            content = error_body(SERVER_ERROR_MESSAGE)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content
        )

    return server_error_handler


def make_boundary_middleware(handler):
    """Wrap ``handler`` as the innermost HTTP middleware.

    Failures no exception handler claimed are rendered here, inside the
    middleware chain, so the 500 still gets the request id, security headers
    and access-log record like every other response.
    """

    async def boundary_middleware(request, call_next):  # type: ignore
        try:
            return await call_next(request)
        except Exception as exc:
            return handler(request, exc)

    return boundary_middleware
