"""API error kinds and their JSON rendering."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class ApiError(Exception):
    """Base class for errors that terminate a request with a JSON body."""

    status_code: int = 500
    default_message: str = "Server Error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def headers(self) -> dict[str, str] | None:
        return None

    def to_payload(self) -> dict:
        return {"message": self.message}


class BadRequest(ApiError):
    status_code = 400
    default_message = "Bad request"


class Unauthenticated(ApiError):
    status_code = 401
    default_message = "Unauthenticated."

    @property
    def headers(self) -> dict[str, str]:
        return {"WWW-Authenticate": "Bearer"}


class InvalidCredentials(ApiError):
    """Login with an unknown email or a wrong password."""

    status_code = 401
    default_message = "Unauthorised"

    def to_payload(self) -> dict:
        return {"error": self.message}


class Forbidden(ApiError):
    status_code = 403
    default_message = "Forbidden"


class NotFound(ApiError):
    status_code = 404
    default_message = "Resource not found"


class ValidationFailed(ApiError):
    """Submitted fields were rejected before reaching the store.

    ``errors`` maps each failing field to the list of reasons it failed.
    """

    status_code = 422
    default_message = "The given data was invalid."

    def __init__(self, errors: dict[str, list[str]], message: str | None = None):
        super().__init__(message)
        self.errors = errors

    def to_payload(self) -> dict:
        return {"message": self.message, "errors": self.errors}


async def handle_api_error(request: Request, exc: ApiError) -> JSONResponse:
    """Render an ApiError as its JSON payload."""
    return JSONResponse(
        status_code=exc.status_code, content=exc.to_payload(), headers=exc.headers
    )


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render FastAPI's own parameter validation errors in the ValidationFailed shape."""
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        location = [
            str(part) for part in error.get("loc", ()) if part not in ("body", "path", "query")
        ]
        field = ".".join(location) or "request"
        errors.setdefault(field, []).append(error.get("msg", "Invalid value"))
    return await handle_api_error(request, ValidationFailed(errors))


def register_error_handlers(app: FastAPI) -> None:
    """Attach the error handlers to the application."""
    app.add_exception_handler(ApiError, handle_api_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
