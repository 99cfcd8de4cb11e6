"""Unit tests for predefined status constructors."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from rpcerrors.core import predefined
from rpcerrors.core.projection import status_of
from rpcerrors.core.status import StatusCode
from rpcerrors.schemas.details import ErrorInfo
from rpcerrors.schemas.details import ResourceInfo


@pytest.mark.parametrize(
    ("constructor", "expected"),
    [
        (predefined.with_not_found, StatusCode.NOT_FOUND),
        (predefined.with_bad_request, StatusCode.INVALID_ARGUMENT),
        (predefined.with_failed_precondition, StatusCode.FAILED_PRECONDITION),
        (predefined.with_out_of_range, StatusCode.OUT_OF_RANGE),
        (predefined.with_unauthenticated, StatusCode.UNAUTHENTICATED),
        (predefined.with_permission_denied, StatusCode.PERMISSION_DENIED),
        (predefined.with_aborted, StatusCode.ABORTED),
        (predefined.with_already_exists, StatusCode.ALREADY_EXISTS),
        (predefined.with_resource_exhausted, StatusCode.RESOURCE_EXHAUSTED),
        (predefined.with_cancelled, StatusCode.CANCELLED),
        (predefined.with_data_loss, StatusCode.DATA_LOSS),
        (predefined.with_unknown, StatusCode.UNKNOWN),
        (predefined.with_internal, StatusCode.INTERNAL),
        (predefined.with_unimplemented, StatusCode.UNIMPLEMENTED),
        (predefined.with_unavailable, StatusCode.UNAVAILABLE),
        (predefined.with_deadline_exceeded, StatusCode.DEADLINE_EXCEEDED),
    ],
)
def test_constructor_sets_code_and_keeps_message(
    constructor: Callable[..., Any],
    expected: StatusCode,
) -> None:
    cause = RuntimeError("boom")

    err = constructor(cause)

    assert err.code is expected
    assert str(err) == "boom"
    assert err.cause is cause
    assert err.details == []
    assert status_of(err) is expected
    assert constructor(None) is None


def test_constructor_attaches_detail() -> None:
    info = ResourceInfo(resource_type="pet.v1.Cat", resource_name="cat123")

    err = predefined.with_not_found(LookupError("no rows"), info)

    assert err.details == [info]


def test_constructor_detail_is_optional() -> None:
    err = predefined.with_permission_denied(PermissionError("denied"), None)
    with_info = predefined.with_permission_denied(PermissionError("denied"), ErrorInfo(reason="ACL"))

    assert err.details == []
    assert with_info.details == [ErrorInfo(reason="ACL")]
