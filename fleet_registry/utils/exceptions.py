import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fleet_registry.utils.response import error_response

logger = logging.getLogger(__name__)


class AppException(Exception):
    def __init__(self, message: str, status_code: int = 400, errors: list[dict] | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.errors = errors


class ValidationError(AppException):
    """Input broke one or more field constraints.

    ``errors`` holds one ``{"field": ..., "reason": ...}`` entry per violation.
    """

    def __init__(self, errors: list[dict], message: str = "Invalid vehicle data"):
        super().__init__(message, status_code=422, errors=errors)


class NotFoundError(AppException):
    def __init__(self, message: str = "Vehicle not found"):
        super().__init__(message, status_code=404)


class ConflictError(AppException):
    def __init__(self, message: str = "A vehicle with this plate is already registered"):
        super().__init__(message, status_code=409)


class StorageUnavailableError(AppException):
    def __init__(self, message: str = "Vehicle storage is unavailable"):
        super().__init__(message, status_code=503)


def field_errors(raw_errors) -> list[dict]:
    """Flatten pydantic/FastAPI error dicts into field/reason pairs."""
    errors = []
    for err in raw_errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append({"field": ".".join(loc) or "__root__", "reason": err.get("msg", "Invalid value")})
    return errors


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(exc.message, data=exc.errors),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content=error_response("Invalid request", data=field_errors(exc.errors())),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content=error_response("Internal server error"),
        )
