"""Holder for the active media root with atomic, validated replacement.

Example:
    store = RootDirectoryStore(Path("/data/media"))
    snapshot = store.current()
    store.replace(Path("/mnt/other-media"))
"""

from __future__ import annotations

import logging
import threading
from functools import lru_cache
from pathlib import Path

from media_browser.config import get_settings

from .paths import RootContext


logger = logging.getLogger("media_browser.root")


class RootDirectoryStore:
    """Keep one immutable RootContext and swap it under a lock.

    Requests read a snapshot once at the start; a replacement never affects a
    request that already holds the previous value.
    """

    def __init__(self, initial: Path | str):
        self._lock = threading.Lock()
        self._context = RootContext.from_path(initial)
        logger.info("root_configured", extra={"root": str(self._context.path)})

    def current(self) -> RootContext:
        with self._lock:
            return self._context

    def replace(self, path: Path | str) -> RootContext:
        """Validate ``path`` as an existing directory and make it the active root."""

        context = RootContext.from_path(path)
        with self._lock:
            previous = self._context
            self._context = context
        logger.info(
            "root_replaced",
            extra={"previous": str(previous.path), "root": str(context.path)},
        )
        return context


@lru_cache(maxsize=1)
def get_root_store() -> RootDirectoryStore:
    """Return the process-wide root store built from settings."""

    return RootDirectoryStore(get_settings().root_directory)


def current_root() -> RootContext:
    """FastAPI dependency returning the request's root snapshot."""

    return get_root_store().current()
