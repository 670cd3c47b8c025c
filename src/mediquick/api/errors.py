"""Map domain errors to HTTP responses.

Every error renders as ``{"error": <class name>, "messages": {...}}``.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import InvalidDataError, ObjectNotFoundError, ValidationError

from mediquick.shared.errors import AlreadyAssigned, Conflict, InvalidState, MalformedToken, Unauthorized
from mediquick.utils.logging import get_logger

logger = get_logger(__name__)

# Most specific first; ValidationError catches whatever is left
_STATUS_CODES = [
    (Unauthorized, 403),
    (InvalidState, 409),
    (AlreadyAssigned, 409),
    (Conflict, 409),
    (MalformedToken, 400),
    (ValidationError, 400),
]


def status_code_for(exc: Exception) -> int:
    for error_cls, status_code in _STATUS_CODES:
        if isinstance(exc, error_cls):
            return status_code
    return 500


def _messages(exc: Exception) -> dict:
    messages = getattr(exc, "messages", None)
    if isinstance(messages, dict):
        return {key: [str(m) for m in (value if isinstance(value, list) else [value])] for key, value in messages.items()}
    return {"_entity": [str(messages or exc)]}


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        status_code = status_code_for(exc)
        logger.warning(
            "request_rejected",
            path=request.url.path,
            error=type(exc).__name__,
            status_code=status_code,
        )
        return JSONResponse(
            status_code=status_code,
            content={"error": type(exc).__name__, "messages": _messages(exc)},
        )

    @app.exception_handler(InvalidDataError)
    async def invalid_data_handler(request: Request, exc: InvalidDataError):
        # Raised while building a command from request values; same contract as ValidationError
        logger.warning("request_rejected", path=request.url.path, error="ValidationError", status_code=400)
        return JSONResponse(
            status_code=400,
            content={"error": "ValidationError", "messages": _messages(exc)},
        )

    @app.exception_handler(ObjectNotFoundError)
    async def not_found_handler(request: Request, exc: ObjectNotFoundError):
        logger.warning("record_not_found", path=request.url.path)
        return JSONResponse(
            status_code=404,
            content={"error": "NotFound", "messages": _messages(exc)},
        )
