"""Unit tests for the FastAPI error envelope handlers."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from rpcerrors.codec.json_codec import Encoder
from rpcerrors.codec.json_codec import hide_debug_info
from rpcerrors.core.errors import Message
from rpcerrors.core.errors import StackTrace
from rpcerrors.core.errors import annotate
from rpcerrors.core.status import StatusCode
from rpcerrors.core.status import StatusError
from rpcerrors.schemas.details import ResourceInfo
from rpcerrors.server.handlers import register_error_handlers


class _Pet(BaseModel):
    name: str


class _Litter(BaseModel):
    pets: list[_Pet]


def _build_client(encoder: Encoder | None = None) -> TestClient:
    app = FastAPI()
    register_error_handlers(app, encoder)

    @app.get("/query")
    def query(limit: int) -> dict[str, int]:
        return {"limit": limit}

    @app.post("/litters")
    def create_litter(litter: _Litter) -> dict[str, int]:
        return {"size": len(litter.pets)}

    @app.get("/not-found")
    def not_found() -> None:
        raise annotate(
            LookupError("sql: no rows in result set"),
            Message("loading cat"),
            StatusCode.NOT_FOUND,
            ResourceInfo(resource_type="pet.v1.Cat", resource_name="cat123"),
        )

    @app.get("/status")
    def bare_status() -> None:
        raise StatusError(StatusCode.UNAVAILABLE)

    @app.get("/debug")
    def debug() -> None:
        raise annotate(RuntimeError("boom"), StatusCode.INTERNAL, StackTrace("debug"))

    @app.get("/http")
    def http_error() -> None:
        raise StarletteHTTPException(status_code=409, detail="Cat already adopted")

    @app.get("/crash")
    def crash() -> None:
        raise RuntimeError("secret connection string")

    return TestClient(app, raise_server_exceptions=False)


def test_annotated_errors_use_mapped_http_status() -> None:
    client = _build_client()

    response = client.get("/not-found")

    assert response.status_code == 404
    assert response.json() == {
        "error": {
            "code": 404,
            "message": "loading cat: sql: no rows in result set",
            "status": "NOT_FOUND",
            "details": [
                {
                    "@type": "type.googleapis.com/google.rpc.ResourceInfo",
                    "resourceType": "pet.v1.Cat",
                    "resourceName": "cat123",
                }
            ],
        }
    }


def test_bare_status_errors_use_envelope() -> None:
    client = _build_client()

    response = client.get("/status")

    assert response.status_code == 503
    assert response.json() == {
        "error": {"code": 503, "message": "503 UNAVAILABLE", "status": "UNAVAILABLE"}
    }


def test_request_validation_errors_become_bad_request_detail() -> None:
    client = _build_client()

    response = client.get("/query")

    assert response.status_code == 400
    payload = response.json()["error"]
    assert payload["status"] == "INVALID_ARGUMENT"
    assert payload["message"] == "Request validation failed"
    (detail,) = payload["details"]
    assert detail["@type"] == "type.googleapis.com/google.rpc.BadRequest"
    assert detail["fieldViolations"][0]["field"] == "limit"


def test_http_errors_keep_original_status() -> None:
    client = _build_client()

    response = client.get("/http")

    assert response.status_code == 409
    assert response.json() == {
        "error": {"code": 409, "message": "Cat already adopted", "status": "ABORTED"}
    }


def test_unhandled_errors_do_not_leak_internal_text() -> None:
    client = _build_client()

    response = client.get("/crash")

    assert response.status_code == 500
    assert response.json() == {
        "error": {"code": 500, "message": "Internal server error", "status": "INTERNAL"}
    }
    assert "secret" not in response.text


def test_custom_encoder_applies_detail_mappers() -> None:
    with_debug = _build_client().get("/debug").json()["error"]
    without_debug = _build_client(Encoder([hide_debug_info])).get("/debug").json()["error"]

    assert with_debug["details"][0]["@type"] == "type.googleapis.com/google.rpc.DebugInfo"
    assert "details" not in without_debug


def test_validation_field_paths_index_into_nested_bodies() -> None:
    client = _build_client()

    response = client.post("/litters", json={"pets": [{"name": "cat123"}, {}]})

    assert response.status_code == 400
    (detail,) = response.json()["error"]["details"]
    assert [violation["field"] for violation in detail["fieldViolations"]] == ["pets[1].name"]
