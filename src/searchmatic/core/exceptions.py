"""Domain errors and exception handlers with request_id in responses."""

from collections.abc import Sequence
from typing import Any

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.searchmatic.core.logging import get_logger

logger = get_logger(__name__)


class SearchmaticError(Exception):
    """Base class for errors raised by the service layer."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_detail(self) -> Any:
        return self.message


class ValidationError(SearchmaticError):
    """Malformed input: empty title, out-of-range number, malformed value."""

    status_code = 422


class InvalidEnumValue(ValidationError):
    """Value is not registered for the enumeration field."""

    def __init__(self, field: str, value: Any, allowed: Sequence[str] = ()):
        super().__init__(f"Invalid value {value!r} for {field}")
        self.field = field
        self.value = value
        self.allowed = list(allowed)

    def to_detail(self) -> Any:
        return {"message": self.message, "field": self.field, "allowed": self.allowed}


class NotFound(SearchmaticError):
    """Referenced entity does not exist."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity_type: str, entity_id: Any):
        super().__init__(f"{entity_type.capitalize()} {entity_id} not found")
        self.entity_type = entity_type
        self.entity_id = entity_id


class Forbidden(NotFound):
    """Entity exists but belongs to another owner.

    Subclasses NotFound so callers see the same outcome as a missing row;
    the distinction only reaches the logs.
    """

    def __init__(self, entity_type: str, entity_id: Any, requester_id: Any):
        super().__init__(entity_type, entity_id)
        self.requester_id = requester_id


class ConflictError(SearchmaticError):
    """A multi-row write could not complete atomically; retry the whole operation."""

    status_code = status.HTTP_409_CONFLICT


def setup_exception_handlers(app: FastAPI) -> None:
    """Configure exception handlers that include request_id in responses."""

    @app.exception_handler(SearchmaticError)
    async def domain_exception_handler(request: Request, exc: SearchmaticError) -> JSONResponse:
        request_id = correlation_id.get()
        if isinstance(exc, Forbidden):
            logger.warning(
                "Access denied",
                entity_type=exc.entity_type,
                entity_id=str(exc.entity_id),
                requester_id=str(exc.requester_id),
                path=request.url.path,
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.to_detail(),
                "request_id": request_id,
            },
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={
                "detail": jsonable_encoder(exc.errors()),
                "request_id": correlation_id.get(),
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def starlette_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "request_id": correlation_id.get(),
            },
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "request_id": correlation_id.get(),
            },
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        request_id = correlation_id.get()
        logger.exception(
            "Unhandled exception",
            exc_info=exc,
            request_id=request_id,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "request_id": request_id,
            },
        )
