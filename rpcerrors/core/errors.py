"""Annotated error carrier and the annotation protocol used to build it."""

from __future__ import annotations

from collections.abc import Sequence
import traceback
from typing import Any
from typing import Protocol
from typing import runtime_checkable

from rpcerrors.core.config import get_codec_settings
from rpcerrors.core.status import StatusCode
from rpcerrors.core.status import StatusError
from rpcerrors.core.status import format_code
from rpcerrors.core.status import valid
from rpcerrors.schemas.details import DebugInfo
from rpcerrors.schemas.details import Detail
from rpcerrors.schemas.details import detail_verbose_lines


class Modifier(Protocol):
    """Operations an annotation may apply to an error under construction."""

    def set_code(self, code: int) -> None: ...

    def wrap_message(self, message: str) -> None: ...

    def append_details(self, *details: Any) -> None: ...


@runtime_checkable
class Annotation(Protocol):
    def annotate(self, modifier: Modifier) -> None: ...


class AnnotatedError(Exception):
    """Error carrying a status code, a message and typed details over a cause.

    `str(err)` is the accumulated message. The wrapped cause is also exposed as
    `__cause__` so tracebacks render the chain.
    """

    def __init__(
        self,
        cause: BaseException | None = None,
        *,
        code: int = StatusCode.OK,
        message: str = "",
        details: Sequence[Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.cause = cause
        self.code: StatusCode | int = StatusCode(code) if valid(code) else int(code)
        self.message = message
        self.details: list[Any] = list(details) if details else []
        self.__cause__ = cause

    def set_code(self, code: int) -> None:
        self.code = StatusCode(code) if valid(code) else int(code)

    def wrap_message(self, message: str) -> None:
        if not self.message:
            self.message = message
        else:
            self.message = f"{message}: {self.message}"

    def append_details(self, *details: Any) -> None:
        self.details.extend(details)

    def unwrap(self) -> BaseException | None:
        return self.cause

    def __reduce__(self) -> tuple[Any, ...]:
        # `args` holds only the message; the cause and fields travel separately.
        state = {
            "args": self.args,
            "code": self.code,
            "message": self.message,
            "details": list(self.details),
        }
        return (type(self), (self.cause,), state)

    def copy(self) -> AnnotatedError:
        return AnnotatedError(
            self.cause,
            code=self.code,
            message=self.message,
            details=self.details,
        )

    def verbose(self) -> str:
        """Render status, message and every detail for diagnostics."""
        lines = [
            f"status: {format_code(self.code)!r}",
            f"message: {self.message!r}",
        ]
        for index, detail in enumerate(self.details):
            lines.append(f"detail[{index}]:")
            lines.extend(f"\t{line}" for line in detail_verbose_lines(detail))
        return "\n".join(lines)

    def log_context(self) -> dict[str, Any]:
        return {
            "status": format_code(self.code),
            "message": self.message,
            "detail_types": [detail.type_url() for detail in self.details],
        }

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"AnnotatedError(code={format_code(self.code)!r}, message={self.message!r}, "
            f"details={len(self.details)})"
        )


class Message(str):
    """Message annotation; prepends context to the accumulated message."""

    def annotate(self, modifier: Modifier) -> None:
        modifier.wrap_message(str(self))


class StackTrace:
    """Annotation capturing the call stack where it is applied.

    Appends a `DebugInfo` detail whose `detail` is the token passed in. Frames
    inside this module are dropped; `RPCERRORS_STACK_LIMIT` bounds the number
    of innermost frames kept.
    """

    def __init__(self, token: str = "") -> None:
        self.token = token

    def annotate(self, modifier: Modifier) -> None:
        limit = get_codec_settings().stack_limit or None
        frames = traceback.extract_stack()
        while frames and frames[-1].filename == __file__:
            frames.pop()
        if limit is not None:
            frames = frames[-limit:]
        entries: list[str] = []
        for chunk in traceback.format_list(frames):
            entries.extend(chunk.rstrip("\n").splitlines())
        modifier.append_details(DebugInfo(stack_entries=entries, detail=self.token))


def _as_annotation(value: Any) -> Annotation:
    if isinstance(value, str) and not isinstance(value, Message):
        return Message(value)
    if isinstance(value, Annotation):
        return value
    if isinstance(value, Detail):
        return _DetailAnnotation(value)
    raise TypeError(f"Unsupported annotation: {type(value).__name__}")


class _DetailAnnotation:
    def __init__(self, detail: Any) -> None:
        self._detail = detail

    def annotate(self, modifier: Modifier) -> None:
        modifier.append_details(self._detail)


def annotate(cause: BaseException | StatusCode | None, *annotations: Any) -> AnnotatedError | None:
    """Wrap `cause` and apply `annotations` in order.

    An annotated cause is copied rather than mutated, keeping its message and
    details; new messages are prepended. A `None` cause yields `None`.
    """
    if cause is None:
        return None
    if isinstance(cause, StatusCode):
        cause = StatusError(cause)

    if isinstance(cause, AnnotatedError):
        target = cause.copy()
    else:
        target = AnnotatedError(cause, message=str(cause))
        if isinstance(cause, StatusError):
            target.set_code(cause.code)

    for annotation in annotations:
        _as_annotation(annotation).annotate(target)
    return target
