"""Shared pytest fixtures for rpcerrors test suites."""

from collections.abc import Generator
from pathlib import Path
import sys

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture(autouse=True)
def fresh_codec_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Isolate each test from ambient `RPCERRORS_*` variables and cached settings."""
    from rpcerrors.core.config import get_codec_settings

    for name in ("RPCERRORS_HIDE_DEBUG_INFO", "RPCERRORS_STACK_LIMIT", "RPCERRORS_JSON_CONTENT_TYPE"):
        monkeypatch.delenv(name, raising=False)
    get_codec_settings.cache_clear()
    yield
    get_codec_settings.cache_clear()


@pytest.fixture
def restore_registry() -> Generator[None, None, None]:
    """Snapshot detail registrations and restore them after the test."""
    from rpcerrors.codec import registry

    snapshot = dict(registry._factories)
    yield
    with registry._lock:
        registry._factories.clear()
        registry._factories.update(snapshot)
