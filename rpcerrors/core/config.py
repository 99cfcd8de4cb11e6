"""Library configuration helpers."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import os

DEFAULT_JSON_CONTENT_TYPE = "application/json"
DEFAULT_STACK_LIMIT = 0

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


def _get_bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUE_VALUES


def _get_int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    return int(raw)


@dataclass(frozen=True)
class CodecSettings:
    """Runtime settings for error encoding and stack capture."""

    hide_debug_info: bool
    stack_limit: int
    json_content_type: str

    def safe_for_logging(self) -> dict[str, str | int | bool]:
        return {
            "hide_debug_info": self.hide_debug_info,
            "stack_limit": self.stack_limit,
            "json_content_type": self.json_content_type,
        }


@lru_cache(maxsize=1)
def get_codec_settings() -> CodecSettings:
    """Load codec settings from the environment."""
    stack_limit = _get_int_env("RPCERRORS_STACK_LIMIT", DEFAULT_STACK_LIMIT)
    if stack_limit < 0:
        raise ValueError("RPCERRORS_STACK_LIMIT must be >= 0")
    return CodecSettings(
        hide_debug_info=_get_bool_env("RPCERRORS_HIDE_DEBUG_INFO", False),
        stack_limit=stack_limit,
        json_content_type=os.getenv("RPCERRORS_JSON_CONTENT_TYPE", DEFAULT_JSON_CONTENT_TYPE),
    )
