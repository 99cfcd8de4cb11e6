"""Wire envelope schemas for serialized errors."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict


class ErrorBody(BaseModel):
    """Canonical error payload object.

    Details stay raw JSON objects here; their concrete shape is resolved
    through the type-url registry once `@type` is known.
    """

    model_config = ConfigDict(extra="ignore")

    code: int | None = None
    message: str | None = None
    status: str | None = None
    details: list[dict[str, Any]] | None = None


class ErrorEnvelope(BaseModel):
    """Top-level error envelope; other top-level keys are tolerated."""

    model_config = ConfigDict(extra="ignore")

    error: ErrorBody | None = None
