from __future__ import annotations

import logging
import threading
from importlib import metadata
from typing import Callable

from statuscheck.config import settings

logger = logging.getLogger(__name__)

UNKNOWN_VERSION = "n/a"


def distribution_version() -> str | None:
    return metadata.version(settings.STATUSCHECK_DIST_NAME)


class VersionCache:
    """
    Resolves the build version once and serves the cached value afterwards.
    Resolver errors are logged and cached as ``n/a``.
    """

    def __init__(self, resolver: Callable[[], str | None] | None = None) -> None:
        self._resolver = resolver or distribution_version
        self._version: str | None = None
        self._lock = threading.Lock()

    def get(self) -> str:
        if self._version is not None:
            return self._version
        with self._lock:
            if self._version is None:
                self._version = self._resolve()
            return self._version

    def reset(self) -> None:
        with self._lock:
            self._version = None

    def _resolve(self) -> str:
        try:
            return self._resolver() or UNKNOWN_VERSION
        except Exception as exc:
            logger.error("Unable to resolve version: %s", exc)
            return UNKNOWN_VERSION


version_cache = VersionCache()
