"""JSON codec for the canonical `{"error": {...}}` envelope."""

from __future__ import annotations

from collections.abc import Mapping
from collections.abc import Sequence
import json
import logging
from typing import IO
from typing import Any

from pydantic import ValidationError

from rpcerrors.codec.registry import lookup
from rpcerrors.core.config import get_codec_settings
from rpcerrors.core.errors import AnnotatedError
from rpcerrors.core.projection import DetailMapper
from rpcerrors.core.projection import flatten
from rpcerrors.core.status import StatusCode
from rpcerrors.core.status import StatusError
from rpcerrors.core.status import code_from_name
from rpcerrors.core.status import http_of
from rpcerrors.core.status import name_of
from rpcerrors.schemas.details import TYPE_KEY
from rpcerrors.schemas.details import TYPE_URL_DEBUG_INFO
from rpcerrors.schemas.details import AnyDetail
from rpcerrors.schemas.details import detail_to_wire
from rpcerrors.schemas.error import ErrorBody
from rpcerrors.schemas.error import ErrorEnvelope

logger = logging.getLogger(__name__)


class ErrorDecodeError(ValueError):
    """Raised when a serialized error envelope is structurally malformed."""


def hide_debug_info(detail: Any) -> Any:
    """Detail mapper dropping `DebugInfo` payloads."""
    if detail.type_url() == TYPE_URL_DEBUG_INFO:
        return None
    return detail


class Encoder:
    """Serialize errors into the envelope after flattening their chain."""

    def __init__(self, mappers: Sequence[DetailMapper] | None = None) -> None:
        self.mappers: list[DetailMapper] = list(mappers or [])

    def to_envelope(self, err: Any) -> dict[str, Any]:
        flattened = flatten(err, *self.mappers)
        body: dict[str, Any] = {}
        if flattened is not None and _has_content(flattened):
            body["code"] = http_of(flattened.code)
            if flattened.message:
                body["message"] = flattened.message
            body["status"] = name_of(flattened.code)
            if flattened.details:
                body["details"] = [detail_to_wire(detail) for detail in flattened.details]
        return {"error": body}

    def encode(self, err: Any) -> bytes:
        envelope = self.to_envelope(err)
        return json.dumps(envelope, separators=(",", ":"), ensure_ascii=False).encode("utf-8")

    def write(self, err: Any, stream: IO[bytes]) -> None:
        stream.write(self.encode(err))


def _has_content(err: AnnotatedError) -> bool:
    return err.code != StatusCode.OK or bool(err.message) or bool(err.details)


class Decoder:
    """Rebuild annotated errors from the envelope.

    The decoded error's cause is the bare status, and details are resolved
    through the type-url registry with `AnyDetail` as the fallback.
    """

    def decode(self, data: bytes | str) -> AnnotatedError:
        try:
            envelope = ErrorEnvelope.model_validate_json(data)
        except ValidationError as exc:
            raise ErrorDecodeError(f"Malformed error envelope: {exc}") from exc

        body = envelope.error or ErrorBody()
        code = code_from_name(body.status)
        return AnnotatedError(
            StatusError(code),
            code=code,
            message=body.message or "",
            details=[_decode_detail(raw) for raw in body.details or []],
        )

    def read(self, stream: IO[bytes] | IO[str]) -> AnnotatedError:
        return self.decode(stream.read())


def _decode_detail(raw: Mapping[str, Any]) -> Any:
    type_url = raw.get(TYPE_KEY)
    factory = lookup(type_url) if isinstance(type_url, str) else None
    if factory is None:
        logger.debug("No factory registered for detail type %r; keeping raw payload", type_url)
        return AnyDetail(raw)
    try:
        return factory(raw)
    except (ValueError, TypeError) as exc:
        raise ErrorDecodeError(f"Malformed detail of type {type_url}: {exc}") from exc


def default_encoder() -> Encoder:
    """Build an encoder honoring `RPCERRORS_HIDE_DEBUG_INFO`."""
    settings = get_codec_settings()
    mappers: list[DetailMapper] = [hide_debug_info] if settings.hide_debug_info else []
    return Encoder(mappers)


def encode(err: Any, *mappers: DetailMapper) -> bytes:
    return Encoder(mappers).encode(err)


def decode(data: bytes | str) -> AnnotatedError:
    return Decoder().decode(data)
