"""Canonical status catalog and the status-code error value."""

from __future__ import annotations

from enum import IntEnum
from typing import TYPE_CHECKING
from typing import Any

if TYPE_CHECKING:
    from rpcerrors.core.errors import Modifier


class StatusCode(IntEnum):
    OK = 0
    CANCELLED = 1
    UNKNOWN = 2
    INVALID_ARGUMENT = 3
    DEADLINE_EXCEEDED = 4
    NOT_FOUND = 5
    ALREADY_EXISTS = 6
    PERMISSION_DENIED = 7
    RESOURCE_EXHAUSTED = 8
    FAILED_PRECONDITION = 9
    ABORTED = 10
    OUT_OF_RANGE = 11
    UNIMPLEMENTED = 12
    INTERNAL = 13
    UNAVAILABLE = 14
    DATA_LOSS = 15
    UNAUTHENTICATED = 16

    def annotate(self, modifier: Modifier) -> None:
        """Apply this status to an error under construction."""
        modifier.set_code(self)

    @property
    def http(self) -> int:
        return http_of(self)

    def __str__(self) -> str:
        return format_code(self)


_TOTAL_STATUS = len(StatusCode)

_HTTP_CODES: dict[StatusCode, int] = {
    StatusCode.OK: 200,
    StatusCode.CANCELLED: 499,
    StatusCode.UNKNOWN: 500,
    StatusCode.INVALID_ARGUMENT: 400,
    StatusCode.DEADLINE_EXCEEDED: 504,
    StatusCode.NOT_FOUND: 404,
    StatusCode.ALREADY_EXISTS: 409,
    StatusCode.PERMISSION_DENIED: 403,
    StatusCode.RESOURCE_EXHAUSTED: 429,
    StatusCode.FAILED_PRECONDITION: 400,
    StatusCode.ABORTED: 409,
    StatusCode.OUT_OF_RANGE: 400,
    StatusCode.UNIMPLEMENTED: 501,
    StatusCode.INTERNAL: 500,
    StatusCode.UNAVAILABLE: 503,
    StatusCode.DATA_LOSS: 500,
    StatusCode.UNAUTHENTICATED: 401,
}

_NAME_MAP: dict[str, StatusCode] = {code.name: code for code in StatusCode}


def valid(code: int) -> bool:
    """Return whether an integer falls inside the status catalog."""
    return 0 <= int(code) < _TOTAL_STATUS


def http_of(code: int) -> int:
    """Return the HTTP status mapped to a code; out-of-range codes map to 500."""
    if valid(code):
        return _HTTP_CODES[StatusCode(code)]
    return 500


def name_of(code: int) -> str:
    """Return the canonical uppercase name, or `Code(<n>)` for unknown values."""
    if valid(code):
        return StatusCode(code).name
    return f"Code({int(code)})"


def retryable(code: int) -> bool:
    return int(code) == StatusCode.UNAVAILABLE


def code_from_name(name: Any) -> StatusCode:
    """Resolve a status name case-insensitively, defaulting to `UNKNOWN`."""
    if name is None:
        return StatusCode.UNKNOWN
    return _NAME_MAP.get(str(name).strip().upper(), StatusCode.UNKNOWN)


def format_code(code: int) -> str:
    return f"{http_of(code)} {name_of(code)}"


class StatusError(Exception):
    """A bare status code used as an error value.

    Compares equal to other status errors with the same code and to the plain
    integer/`StatusCode` value, so identity checks against a status code keep
    working after the error has crossed the wire.
    """

    def __init__(self, code: int) -> None:
        self.code: StatusCode | int = StatusCode(code) if valid(code) else int(code)
        super().__init__(format_code(self.code))

    def temporary(self) -> bool:
        return retryable(self.code)

    def __reduce__(self) -> tuple[Any, ...]:
        return (type(self), (int(self.code),))

    def __str__(self) -> str:
        return format_code(self.code)

    def __repr__(self) -> str:
        return f"StatusError({name_of(self.code)})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, StatusError):
            return int(self.code) == int(other.code)
        if isinstance(other, int) and not isinstance(other, bool):
            return int(self.code) == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash((StatusError, int(self.code)))
