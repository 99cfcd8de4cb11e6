"""`requests` transport adapter turning failed responses into annotated errors."""

from __future__ import annotations

import logging
from typing import Any

import requests
from requests.adapters import BaseAdapter
from requests.adapters import HTTPAdapter

from rpcerrors.codec.json_codec import Decoder
from rpcerrors.codec.json_codec import ErrorDecodeError
from rpcerrors.core.config import get_codec_settings
from rpcerrors.core.errors import AnnotatedError
from rpcerrors.core.errors import Message
from rpcerrors.core.errors import annotate
from rpcerrors.core.status import StatusCode
from rpcerrors.core.status import StatusError

logger = logging.getLogger(__name__)


class StatusAdapter(HTTPAdapter):
    """Raise an `AnnotatedError` for every non-2xx response.

    JSON error bodies are decoded with the envelope codec; any other body
    becomes the message of an `UNKNOWN` error. Transport failures surface as
    `INTERNAL` errors prefixed with the request method and URL. The response
    is always consumed and closed before raising.

    Usage:
        session = requests.Session()
        session.mount("https://", StatusAdapter())
    """

    def __init__(
        self,
        parent: BaseAdapter | None = None,
        *,
        decoder: Decoder | None = None,
        json_content_type: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self._parent = parent
        self._decoder = decoder or Decoder()
        self._json_content_type = json_content_type or get_codec_settings().json_content_type

    def send(self, request: requests.PreparedRequest, **kwargs: Any) -> requests.Response:
        try:
            response = self._next(request, **kwargs)
        except (requests.RequestException, OSError) as exc:
            raise self._transport_error(request, exc) from exc

        if self._is_success(response):
            return response

        raise self._on_error(request, response)

    def close(self) -> None:
        super().close()
        if self._parent is not None:
            self._parent.close()

    def _next(self, request: requests.PreparedRequest, **kwargs: Any) -> requests.Response:
        if self._parent is not None:
            return self._parent.send(request, **kwargs)
        return super().send(request, **kwargs)

    @staticmethod
    def _is_success(response: requests.Response) -> bool:
        return 200 <= response.status_code < 300

    def _is_json(self, response: requests.Response) -> bool:
        return response.headers.get("Content-Type", "").startswith(self._json_content_type)

    def _on_error(self, request: requests.PreparedRequest, response: requests.Response) -> AnnotatedError:
        try:
            body = response.content
        except requests.RequestException as exc:
            return self._transport_error(request, exc)
        finally:
            response.close()

        logger.debug(
            "Converting HTTP %s response for %s %s into an error",
            response.status_code,
            request.method,
            request.url,
        )

        if self._is_json(response):
            try:
                return self._decoder.decode(body)
            except ErrorDecodeError as exc:
                logger.warning(
                    "Undecodable JSON error body for %s %s (HTTP %s)",
                    request.method,
                    request.url,
                    response.status_code,
                )
                return self._transport_error(request, exc)

        text = body.decode(response.encoding or "utf-8", errors="replace").strip()
        annotations = [text] if text else []
        return annotate(StatusError(StatusCode.UNKNOWN), *annotations)

    @staticmethod
    def _transport_error(request: requests.PreparedRequest, exc: BaseException) -> AnnotatedError:
        context = f"{request.method} {request.url}"
        annotations: list[Any] = [StatusCode.INTERNAL]
        if not str(exc).startswith(context):
            annotations.append(Message(context))
        return annotate(exc, *annotations)


def new_session(parent: BaseAdapter | None = None, **adapter_kwargs: Any) -> requests.Session:
    """Return a session with `StatusAdapter` mounted for http and https."""
    session = requests.Session()
    adapter = StatusAdapter(parent, **adapter_kwargs)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session
