"""
Translate registry failures into HTTP problem documents (RFC 7807).
"""

import logging
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..registry.errors import (
    DeviceNotFoundError,
    EmptyRegistryError,
    RegistryError,
)

logger = logging.getLogger(__name__)

PROBLEM_CONTENT_TYPE = "application/problem+json"

# Everything else raised by the registry is a client error
NOT_FOUND_ERRORS = (DeviceNotFoundError, EmptyRegistryError)


def problem_response(status: int, detail: str, instance: str) -> JSONResponse:
    """Build a problem+json response."""
    return JSONResponse(
        status_code=status,
        media_type=PROBLEM_CONTENT_TYPE,
        content={
            "type": "about:blank",
            "title": HTTPStatus(status).phrase,
            "status": status,
            "detail": detail,
            "instance": instance,
        },
    )


def status_for(exc: RegistryError) -> int:
    if isinstance(exc, NOT_FOUND_ERRORS):
        return 404
    return 400


async def handle_registry_error(request: Request, exc: RegistryError) -> JSONResponse:
    status = status_for(exc)
    logger.debug(f"{request.method} {request.url.path} -> {status} [{exc.code}] {exc.message}")
    return problem_response(status, exc.message, request.url.path)


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        problems.append(f"{location}: {error.get('msg')}")
    detail = "Invalid request: " + "; ".join(problems)
    logger.debug(f"{request.method} {request.url.path} -> 400 {detail}")
    return problem_response(400, detail, request.url.path)


def install_error_handlers(app: FastAPI) -> None:
    """Register the exception handlers on an application."""
    app.add_exception_handler(RegistryError, handle_registry_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
