"""Process-wide type-url registry used to decode polymorphic details.

Registration is expected during start-up; the lock makes concurrent
registration and lookup from encode/decode paths safe anyway.
"""

from __future__ import annotations

from collections.abc import Callable
from collections.abc import Mapping
import logging
import threading
from typing import Any

from rpcerrors.schemas.details import BUILTIN_DETAILS

logger = logging.getLogger(__name__)

DetailFactory = Callable[[Mapping[str, Any]], Any]

_lock = threading.Lock()
_factories: dict[str, DetailFactory] = {
    detail_cls.TYPE_URL: detail_cls.model_validate for detail_cls in BUILTIN_DETAILS
}


def register(type_url: str, factory: DetailFactory | None = None) -> None:
    """Install a factory for `type_url`; passing no factory removes the entry."""
    with _lock:
        if factory is None:
            _factories.pop(type_url, None)
        else:
            _factories[type_url] = factory
    logger.debug("Detail type %s %s", type_url, "unregistered" if factory is None else "registered")


def lookup(type_url: str) -> DetailFactory | None:
    with _lock:
        return _factories.get(type_url)


def registered_types() -> list[str]:
    """Return a snapshot of the registered type-urls."""
    with _lock:
        return list(_factories)
