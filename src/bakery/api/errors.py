"""Translate domain errors into HTTP responses.

Body shape for every rejected request::

    {"error": "<reason code>", "messages": {"<field>": ["<message>", ...]}}
"""

import pydantic
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError

from bakery.exceptions import (
    BakeryError,
    ConflictError,
    InvalidInputError,
    NotFoundError,
    UnprocessableError,
)
from bakery.utils.logging import get_logger

logger = get_logger(__name__)

_STATUS_CODES = {
    NotFoundError: 404,
    UnprocessableError: 422,
    InvalidInputError: 400,
    ConflictError: 409,
}


def status_code_for(exc: BakeryError) -> int:
    return next((code for cls, code in _STATUS_CODES.items() if isinstance(exc, cls)), 400)


def _reject(request: Request, status_code: int, reason: str, messages) -> JSONResponse:
    logger.warning(
        "Request rejected",
        path=request.url.path,
        status_code=status_code,
        reason=reason,
    )
    return JSONResponse(status_code=status_code, content={"error": reason, "messages": messages})


async def bakery_error_handler(request: Request, exc: BakeryError) -> JSONResponse:
    return _reject(request, status_code_for(exc), exc.reason, exc.messages)


async def domain_validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Field and invariant failures raised by aggregates and commands."""
    messages = {
        field: list(msgs) if isinstance(msgs, (list, tuple)) else [str(msgs)] for field, msgs in exc.messages.items()
    }
    return _reject(request, 422, "validation_failed", messages)


async def object_not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return _reject(request, 404, "not_found", {"id": [str(exc)]})


async def validation_error_handler(request: Request, exc: pydantic.ValidationError) -> JSONResponse:
    """Pricing model validation that the request schemas did not catch."""
    messages = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "__root__"
        messages.setdefault(field, []).append(error["msg"])
    return _reject(request, 422, "validation_failed", messages)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BakeryError, bakery_error_handler)
    app.add_exception_handler(ValidationError, domain_validation_error_handler)
    app.add_exception_handler(ObjectNotFoundError, object_not_found_handler)
    app.add_exception_handler(pydantic.ValidationError, validation_error_handler)
