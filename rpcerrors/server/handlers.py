"""FastAPI exception handlers rendering errors as the canonical envelope."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI
from fastapi import Request
from fastapi import status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from rpcerrors.codec.json_codec import Encoder
from rpcerrors.codec.json_codec import default_encoder
from rpcerrors.core.config import get_codec_settings
from rpcerrors.core.errors import AnnotatedError
from rpcerrors.core.projection import status_of
from rpcerrors.core.status import StatusCode
from rpcerrors.core.status import StatusError
from rpcerrors.core.status import http_of
from rpcerrors.schemas.details import BadRequest
from rpcerrors.schemas.details import FieldViolation

logger = logging.getLogger(__name__)

_ENCODER_STATE_KEY = "rpcerrors_encoder"
_LOCATION_SOURCES = frozenset({"body", "query", "path", "header", "cookie"})


def _encoder_for(request: Request) -> Encoder:
    encoder = getattr(request.app.state, _ENCODER_STATE_KEY, None)
    return encoder if encoder is not None else default_encoder()


def _build_error_response(
    request: Request,
    err: BaseException,
    *,
    status_code: int | None = None,
) -> JSONResponse:
    if status_code is None:
        status_code = http_of(status_of(err))
    payload = _encoder_for(request).to_envelope(err)
    return JSONResponse(status_code=status_code, content=payload)


def _http_status_code(status_code: int) -> StatusCode:
    if status_code == status.HTTP_400_BAD_REQUEST:
        return StatusCode.INVALID_ARGUMENT
    if status_code == status.HTTP_401_UNAUTHORIZED:
        return StatusCode.UNAUTHENTICATED
    if status_code == status.HTTP_403_FORBIDDEN:
        return StatusCode.PERMISSION_DENIED
    if status_code == status.HTTP_404_NOT_FOUND:
        return StatusCode.NOT_FOUND
    if status_code == status.HTTP_409_CONFLICT:
        return StatusCode.ABORTED
    if status_code == status.HTTP_429_TOO_MANY_REQUESTS:
        return StatusCode.RESOURCE_EXHAUSTED
    if status_code == status.HTTP_501_NOT_IMPLEMENTED:
        return StatusCode.UNIMPLEMENTED
    if status_code == status.HTTP_503_SERVICE_UNAVAILABLE:
        return StatusCode.UNAVAILABLE
    if status_code == status.HTTP_504_GATEWAY_TIMEOUT:
        return StatusCode.DEADLINE_EXCEEDED
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        return StatusCode.INTERNAL
    return StatusCode.FAILED_PRECONDITION


def _validation_violations(exc: RequestValidationError) -> list[FieldViolation]:
    violations: list[FieldViolation] = []
    for issue in exc.errors():
        field = _field_path(issue.get("loc", ()))
        description = str(issue.get("msg", "Invalid value"))
        violations.append(FieldViolation(field=field, description=description))
    return violations


def _field_path(location: Any) -> str:
    """Render a validation location as a field path such as `pets[0].name`."""
    if not isinstance(location, (tuple, list)):
        return str(location)

    parts = list(location)
    if parts and parts[0] in _LOCATION_SOURCES:
        parts = parts[1:]

    path = ""
    for part in parts:
        if isinstance(part, int):
            path += f"[{part}]"
        elif path:
            path += f".{part}"
        else:
            path = str(part)
    return path or "request"


async def annotated_error_handler(request: Request, exc: AnnotatedError) -> JSONResponse:
    """Render annotated errors with the HTTP status mapped from their code."""
    return _build_error_response(request, exc)


async def status_error_handler(request: Request, exc: StatusError) -> JSONResponse:
    return _build_error_response(request, exc)


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Normalize FastAPI validation errors to `INVALID_ARGUMENT` with a `BadRequest` detail."""
    err = AnnotatedError(
        exc,
        code=StatusCode.INVALID_ARGUMENT,
        message="Request validation failed",
        details=[BadRequest(field_violations=_validation_violations(exc))],
    )
    return _build_error_response(request, err)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Normalize HTTP exceptions, keeping their original HTTP status."""
    message = str(exc.detail) if isinstance(exc.detail, str) and exc.detail else "Request failed"
    err = AnnotatedError(exc, code=_http_status_code(exc.status_code), message=message)
    return _build_error_response(request, err, status_code=exc.status_code)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Avoid leaking internal exception text while keeping the envelope shape."""
    logger.exception("Unhandled error for %s %s", request.method, request.url.path, exc_info=exc)
    err = AnnotatedError(code=StatusCode.INTERNAL, message="Internal server error")
    return _build_error_response(request, err)


def register_error_handlers(app: FastAPI, encoder: Encoder | None = None) -> None:
    """Attach envelope-rendering error handlers to a FastAPI app instance."""
    setattr(app.state, _ENCODER_STATE_KEY, encoder)
    app.add_exception_handler(AnnotatedError, annotated_error_handler)
    app.add_exception_handler(StatusError, status_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
    logger.info("Registered rpcerrors handlers with settings=%s", get_codec_settings().safe_for_logging())
