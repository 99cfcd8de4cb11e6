"""Convenience constructors pairing a status code with its usual detail."""

from __future__ import annotations

from typing import Any

from rpcerrors.core.errors import AnnotatedError
from rpcerrors.core.status import StatusCode
from rpcerrors.schemas.details import BadRequest
from rpcerrors.schemas.details import DebugInfo
from rpcerrors.schemas.details import ErrorInfo
from rpcerrors.schemas.details import PreconditionFailure
from rpcerrors.schemas.details import QuotaFailure
from rpcerrors.schemas.details import ResourceInfo


def _predefined(cause: BaseException | None, code: StatusCode, *details: Any) -> AnnotatedError | None:
    if cause is None:
        return None
    return AnnotatedError(
        cause,
        code=code,
        message=str(cause),
        details=[detail for detail in details if detail is not None],
    )


def with_not_found(cause: BaseException | None, detail: ResourceInfo | None = None) -> AnnotatedError | None:
    return _predefined(cause, StatusCode.NOT_FOUND, detail)


def with_bad_request(cause: BaseException | None, detail: BadRequest | None = None) -> AnnotatedError | None:
    return _predefined(cause, StatusCode.INVALID_ARGUMENT, detail)


def with_failed_precondition(
    cause: BaseException | None,
    detail: PreconditionFailure | None = None,
) -> AnnotatedError | None:
    return _predefined(cause, StatusCode.FAILED_PRECONDITION, detail)


def with_out_of_range(cause: BaseException | None, detail: BadRequest | None = None) -> AnnotatedError | None:
    return _predefined(cause, StatusCode.OUT_OF_RANGE, detail)


def with_unauthenticated(cause: BaseException | None, detail: ErrorInfo | None = None) -> AnnotatedError | None:
    return _predefined(cause, StatusCode.UNAUTHENTICATED, detail)


def with_permission_denied(cause: BaseException | None, detail: ErrorInfo | None = None) -> AnnotatedError | None:
    return _predefined(cause, StatusCode.PERMISSION_DENIED, detail)


def with_aborted(cause: BaseException | None, detail: ErrorInfo | None = None) -> AnnotatedError | None:
    return _predefined(cause, StatusCode.ABORTED, detail)


def with_already_exists(cause: BaseException | None, detail: ResourceInfo | None = None) -> AnnotatedError | None:
    return _predefined(cause, StatusCode.ALREADY_EXISTS, detail)


def with_resource_exhausted(
    cause: BaseException | None,
    detail: QuotaFailure | None = None,
) -> AnnotatedError | None:
    return _predefined(cause, StatusCode.RESOURCE_EXHAUSTED, detail)


def with_cancelled(cause: BaseException | None) -> AnnotatedError | None:
    return _predefined(cause, StatusCode.CANCELLED)


def with_data_loss(cause: BaseException | None, detail: DebugInfo | None = None) -> AnnotatedError | None:
    return _predefined(cause, StatusCode.DATA_LOSS, detail)


def with_unknown(cause: BaseException | None, detail: DebugInfo | None = None) -> AnnotatedError | None:
    return _predefined(cause, StatusCode.UNKNOWN, detail)


def with_internal(cause: BaseException | None, detail: DebugInfo | None = None) -> AnnotatedError | None:
    return _predefined(cause, StatusCode.INTERNAL, detail)


def with_unimplemented(cause: BaseException | None) -> AnnotatedError | None:
    return _predefined(cause, StatusCode.UNIMPLEMENTED)


def with_unavailable(cause: BaseException | None, detail: DebugInfo | None = None) -> AnnotatedError | None:
    return _predefined(cause, StatusCode.UNAVAILABLE, detail)


def with_deadline_exceeded(cause: BaseException | None, detail: DebugInfo | None = None) -> AnnotatedError | None:
    return _predefined(cause, StatusCode.DEADLINE_EXCEEDED, detail)
