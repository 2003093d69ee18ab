"""Translate domain exceptions into HTTP responses.

Protean's own handlers are registered first; the kinds this service cares
about are then mapped explicitly so their status codes and bodies are stable.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError, InvalidOperationError, ObjectNotFoundError, ValidationError
from protean.integrations.fastapi import register_exception_handlers

from storefront.catalogue.feed import CatalogFeedUnavailable


def _message(exc: Exception):
    """Entity-level messages are reported as plain text, field-level ones as a dict."""
    messages = getattr(exc, "messages", None)
    if messages is None and exc.args and isinstance(exc.args[0], dict):
        messages = exc.args[0]
    if isinstance(messages, dict) and set(messages) == {"_entity"}:
        return messages["_entity"]
    return messages or str(exc)


async def invalid_argument(request: Request, exc: ValidationError) -> JSONResponse:  # noqa: ARG001
    return JSONResponse(status_code=400, content={"error": "Invalid request", "details": _message(exc)})


async def not_found(request: Request, exc: ObjectNotFoundError) -> JSONResponse:  # noqa: ARG001
    return JSONResponse(status_code=404, content={"error": _message(exc)})


async def precondition_failed(request: Request, exc: InvalidOperationError) -> JSONResponse:  # noqa: ARG001
    return JSONResponse(status_code=400, content={"error": _message(exc)})


async def conflict(request: Request, exc: ExpectedVersionError) -> JSONResponse:  # noqa: ARG001
    return JSONResponse(status_code=409, content={"error": _message(exc)})


async def unavailable(request: Request, exc: CatalogFeedUnavailable) -> JSONResponse:  # noqa: ARG001
    return JSONResponse(status_code=503, content={"error": str(exc)})


def register_error_handlers(app: FastAPI) -> None:
    register_exception_handlers(app)

    app.add_exception_handler(ValidationError, invalid_argument)
    app.add_exception_handler(ObjectNotFoundError, not_found)
    app.add_exception_handler(InvalidOperationError, precondition_failed)
    app.add_exception_handler(ExpectedVersionError, conflict)
    app.add_exception_handler(CatalogFeedUnavailable, unavailable)
