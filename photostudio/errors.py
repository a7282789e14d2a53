"""
Failure taxonomy shared by the services and the HTTP layer.

Services raise these; the handlers installed by ``install_error_handlers``
render every one of them as ``{"error": message}`` with the class status.
"""
from __future__ import annotations
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

log = logging.getLogger(__name__)

INTERNAL_MESSAGE = "Internal server error"


class StudioError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(StudioError):
    status_code = 400


class Unauthenticated(StudioError):
    status_code = 401


class MissingCredential(Unauthenticated):
    def __init__(self, message: str = "Authorization token missing"):
        super().__init__(message)


class InvalidToken(Unauthenticated):
    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)


class ExpiredToken(Unauthenticated):
    def __init__(self, message: str = "Token expired"):
        super().__init__(message)


class UnknownUser(Unauthenticated):
    def __init__(self, message: str = "User not found"):
        super().__init__(message)


class Forbidden(StudioError):
    status_code = 403


class AccountDeactivated(Forbidden):
    def __init__(self, message: str = "Account is deactivated"):
        super().__init__(message)


class NotFound(StudioError):
    status_code = 404


class Conflict(StudioError):
    status_code = 409


class Internal(StudioError):
    status_code = 500


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _validation_message(exc: RequestValidationError) -> str:
    errs = exc.errors()
    if not errs:
        return "Invalid request"
    first = errs[0]
    loc = [str(p) for p in first.get("loc", ())]
    if first.get("type") == "json_invalid":
        return "Malformed JSON body"
    if loc and loc[0] in ("path", "query"):
        return f"Invalid {loc[-1]}"
    field = ".".join(loc[1:]) if loc and loc[0] == "body" else ".".join(loc)
    return f"{field}: {first.get('msg')}" if field else str(first.get("msg"))


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StudioError)
    async def studio_error(request: Request, exc: StudioError):
        if exc.status_code >= 500:
            log.error("%s %s failed: %s", request.method, request.url.path, exc.message, exc_info=exc)
            return _error(exc.status_code, INTERNAL_MESSAGE)
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation(request: Request, exc: RequestValidationError):
        return _error(400, _validation_message(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(SQLAlchemyError)
    async def store_error(request: Request, exc: SQLAlchemyError):
        log.exception("%s %s: persistence failure", request.method, request.url.path, exc_info=exc)
        return _error(500, INTERNAL_MESSAGE)

    @app.exception_handler(Exception)
    async def unexpected(request: Request, exc: Exception):
        log.exception("%s %s: unhandled error", request.method, request.url.path, exc_info=exc)
        return _error(500, INTERNAL_MESSAGE)
