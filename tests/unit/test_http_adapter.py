"""Unit tests for the `requests` status adapter."""

from __future__ import annotations

from collections.abc import Callable
import io
from typing import Any

import pytest
import requests
from requests.adapters import BaseAdapter

from rpcerrors.codec.json_codec import encode
from rpcerrors.core.errors import AnnotatedError
from rpcerrors.core.errors import Message
from rpcerrors.core.errors import annotate
from rpcerrors.core.projection import status_of
from rpcerrors.core.status import StatusCode
from rpcerrors.schemas.details import BadRequest
from rpcerrors.schemas.details import FieldViolation
from rpcerrors.schemas.details import ResourceInfo
from rpcerrors.transport.adapter import StatusAdapter
from rpcerrors.transport.adapter import new_session

URL = "https://pets.example.com/v1/cats/cat123"

RESOURCE_INFO = ResourceInfo(resource_type="1", resource_name="2", owner="3", description="4")
BAD_REQUEST = BadRequest(field_violations=[FieldViolation(field="1", description="2")])


class _TrackedResponse(requests.Response):
    def __init__(self) -> None:
        super().__init__()
        self.closed = False

    def close(self) -> None:
        self.closed = True
        super().close()


def _response(status_code: int, body: bytes, content_type: str) -> _TrackedResponse:
    response = _TrackedResponse()
    response.status_code = status_code
    response.raw = io.BytesIO(body)
    response.headers["Content-Type"] = content_type
    response.encoding = "utf-8"
    response.url = URL
    return response


class _ParentStub(BaseAdapter):
    def __init__(self, send_fn: Callable[[requests.PreparedRequest], requests.Response]) -> None:
        super().__init__()
        self._send_fn = send_fn
        self.requests: list[requests.PreparedRequest] = []
        self.closed = False

    def send(self, request: requests.PreparedRequest, **_: Any) -> requests.Response:
        self.requests.append(request)
        response = self._send_fn(request)
        response.request = request
        return response

    def close(self) -> None:
        self.closed = True


def _session_returning(response: requests.Response) -> tuple[requests.Session, _ParentStub]:
    parent = _ParentStub(lambda _request: response)
    return new_session(parent), parent


def test_success_response_passes_through() -> None:
    session, parent = _session_returning(_response(200, b'{"name":"cat123"}', "application/json"))

    response = session.get(URL)

    assert response.status_code == 200
    assert response.json() == {"name": "cat123"}
    assert len(parent.requests) == 1
    assert parent.requests[0].url == URL


def test_json_error_body_is_decoded() -> None:
    err = annotate(
        RuntimeError("sql: connection is already closed"),
        Message("msg"),
        StatusCode.INTERNAL,
        RESOURCE_INFO,
        BAD_REQUEST,
    )
    response = _response(500, encode(err), "application/json; charset=utf-8")
    session, _ = _session_returning(response)

    with pytest.raises(AnnotatedError) as exc_info:
        session.get(URL)

    raised = exc_info.value
    assert raised.code is StatusCode.INTERNAL
    assert str(raised) == "msg: sql: connection is already closed"
    assert raised.details == [RESOURCE_INFO, BAD_REQUEST]
    assert response.closed


def test_plain_text_error_body_becomes_unknown() -> None:
    response = _response(404, b"404 page not found\n", "text/plain; charset=utf-8")
    session, _ = _session_returning(response)

    with pytest.raises(AnnotatedError) as exc_info:
        session.get(URL)

    raised = exc_info.value
    assert status_of(raised) is StatusCode.UNKNOWN
    assert "404 page not found" in str(raised)
    assert response.closed


def test_undecodable_json_error_is_internal() -> None:
    response = _response(502, b"<html>bad gateway</html>", "application/json")
    session, _ = _session_returning(response)

    with pytest.raises(AnnotatedError) as exc_info:
        session.get(URL)

    raised = exc_info.value
    assert status_of(raised) is StatusCode.INTERNAL
    assert str(raised).startswith(f"GET {URL}: ")
    assert response.closed


def test_transport_failure_is_internal_with_request_context() -> None:
    def send_fn(_request: requests.PreparedRequest) -> requests.Response:
        raise requests.ConnectionError("connection refused")

    session = new_session(_ParentStub(send_fn))

    with pytest.raises(AnnotatedError) as exc_info:
        session.get(URL)

    raised = exc_info.value
    assert raised.code is StatusCode.INTERNAL
    assert str(raised) == f"GET {URL}: connection refused"
    assert isinstance(raised.cause, requests.ConnectionError)


def test_custom_json_content_type_is_honored() -> None:
    err = annotate(StatusCode.NOT_FOUND, RESOURCE_INFO)
    response = _response(404, encode(err), "application/problem+json")
    session = requests.Session()
    session.mount(
        "https://",
        StatusAdapter(_ParentStub(lambda _request: response), json_content_type="application/problem+json"),
    )

    with pytest.raises(AnnotatedError) as exc_info:
        session.get(URL)

    assert exc_info.value.code is StatusCode.NOT_FOUND
    assert exc_info.value.details == [RESOURCE_INFO]


def test_close_propagates_to_parent() -> None:
    parent = _ParentStub(lambda _request: _response(200, b"", "text/plain"))
    adapter = StatusAdapter(parent)

    adapter.close()

    assert parent.closed
