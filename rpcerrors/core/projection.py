"""Projections that walk a cause chain and summarize it."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from collections.abc import Iterator
import concurrent.futures
from typing import Any

import requests

from rpcerrors.core.errors import AnnotatedError
from rpcerrors.core.status import StatusCode
from rpcerrors.core.status import StatusError

DetailMapper = Callable[[Any], Any]

_CANCELLED_SENTINELS: tuple[type[BaseException], ...] = (
    asyncio.CancelledError,
    concurrent.futures.CancelledError,
)
_DEADLINE_SENTINELS: tuple[type[BaseException], ...] = (
    TimeoutError,
    requests.Timeout,
)


def _coerce(err: Any) -> Any:
    if isinstance(err, StatusCode):
        return StatusError(err)
    return err


def unwrap(err: Any) -> Any:
    """Return the next link of the chain, or `None` at its end.

    Annotated errors expose their cause; foreign errors may offer an `unwrap()`
    method, otherwise the explicit `__cause__` (`raise ... from ...`) is used.
    """
    if isinstance(err, AnnotatedError):
        return err.cause
    custom = getattr(err, "unwrap", None)
    if callable(custom):
        return custom()
    return getattr(err, "__cause__", None)


def iter_chain(err: Any) -> Iterator[Any]:
    """Yield every link from the outermost error to the innermost cause."""
    seen: set[int] = set()
    current = _coerce(err)
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = _coerce(unwrap(current))


def _link_code(link: Any) -> StatusCode | int:
    if isinstance(link, (AnnotatedError, StatusError)):
        return link.code
    return StatusCode.OK


def _sentinel_code(links: list[Any]) -> StatusCode | None:
    for link in links:
        if isinstance(link, _CANCELLED_SENTINELS):
            return StatusCode.CANCELLED
        if isinstance(link, _DEADLINE_SENTINELS):
            return StatusCode.DEADLINE_EXCEEDED
    return None


def _resolve_code(links: list[Any]) -> StatusCode | int:
    for link in links:
        code = _link_code(link)
        if code != StatusCode.OK:
            return code
    if not links:
        return StatusCode.OK
    return _sentinel_code(links) or StatusCode.UNKNOWN


def status_of(err: Any) -> StatusCode | int:
    """Return the first non-OK status along the chain.

    Falls back to platform cancellation/timeout errors and then to `UNKNOWN`;
    only an absent error yields `OK`.
    """
    return _resolve_code(list(iter_chain(err)))


def details_of(err: Any) -> list[Any]:
    details: list[Any] = []
    for link in iter_chain(err):
        if isinstance(link, AnnotatedError):
            details.extend(link.details)
    return details


def temporary(err: Any) -> bool:
    """Return whether any link is `UNAVAILABLE` or reports itself temporary."""
    for link in iter_chain(err):
        if _link_code(link) == StatusCode.UNAVAILABLE:
            return True
        flag = getattr(link, "temporary", None)
        if callable(flag):
            flag = flag()
        if flag is True:
            return True
    return False


def has_status(err: Any, code: int) -> bool:
    """Return whether the chain holds the bare status error for `code`."""
    return any(isinstance(link, StatusError) and link == code for link in iter_chain(err))


def _apply_mappers(detail: Any, mappers: tuple[DetailMapper, ...]) -> Any:
    for mapper in mappers:
        detail = mapper(detail)
        if detail is None:
            return None
    return detail


def flatten(err: Any, *mappers: DetailMapper) -> AnnotatedError | None:
    """Summarize a chain into one annotated error.

    The message comes from the outermost non-empty link, the cause is the
    innermost foreign link and details keep chain order after passing through
    `mappers`; a mapper returning `None` drops the detail.
    """
    links = list(iter_chain(err))
    if not links:
        return None

    message = ""
    details: list[Any] = []
    for link in links:
        if not message:
            message = str(link)
        if isinstance(link, AnnotatedError):
            for detail in link.details:
                mapped = _apply_mappers(detail, mappers)
                if mapped is not None:
                    details.append(mapped)

    # The flattened cause is never itself an annotated error.
    cause = links[-1]
    if isinstance(cause, AnnotatedError):
        cause = cause.cause

    return AnnotatedError(
        cause,
        code=_resolve_code(links),
        message=message,
        details=details,
    )
