"""API error handling: every failure leaves the service as ``{"error": "..."}``.

Status code mapping:
- request validation failures -> 400 Bad Request
- ``HTTPException`` raised by the routers -> its own status code
- unmatched routes -> 404 Not Found
- any other ``Exception`` -> 500 Internal Server Error, details only in the log
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from crm_backend.core.logging import get_logger
from crm_backend.schemas.common_schemas import ErrorResponse

logger = get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "Something went wrong!"
ROUTE_NOT_FOUND_MESSAGE = "Route not found"

# Location prefixes FastAPI puts in front of the field name
_LOCATION_PARTS = {"body", "query", "path", "header"}


def describe_validation_errors(errors) -> str:
    """Turns pydantic error dicts into one message the UI can show as is."""
    if not errors:
        return "Invalid request"

    error = errors[0]
    field = ".".join(str(part) for part in error.get("loc", ()) if part not in _LOCATION_PARTS)
    if error.get("type") in ("missing", "string_too_short"):
        return f"{field} is required" if field else "Request body is required"

    reason = error.get("msg", "invalid value").removeprefix("Value error, ")
    return f"Invalid {field}: {reason}" if field else f"Invalid request: {reason}"


def error_response(status_code: int, message: str, headers=None) -> JSONResponse:
    body = ErrorResponse(error=message)
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)


async def _handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 400 for malformed or incomplete requests."""
    message = describe_validation_errors(exc.errors())
    logger.info(f"Validation error on {request.method} {request.url.path}: {message}")
    return error_response(status.HTTP_400_BAD_REQUEST, message)


async def _handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail
    if exc.status_code == status.HTTP_404_NOT_FOUND and message == "Not Found":
        message = ROUTE_NOT_FOUND_MESSAGE
    return error_response(exc.status_code, str(message), headers=getattr(exc, "headers", None))


class CatchAllErrorMiddleware(BaseHTTPMiddleware):
    """Converts any unhandled exception into a generic 500 response."""

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception:
            logger.error(
                f"Unhandled exception on {request.method} {request.url.path}",
                exc_info=True,
            )
            return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)


def register_error_handlers(app: FastAPI) -> None:
    """Attach the exception handlers and the catch-all middleware to the app."""
    app.add_exception_handler(RequestValidationError, _handle_validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, _handle_http_exception)  # type: ignore[arg-type]
    app.add_middleware(CatchAllErrorMiddleware)
