"""
Template bytes cache

Read-through cache of template file contents keyed by resolved path.
It is passed explicitly to the injector and the generator; the file
watcher that owns template changes calls invalidate() with the changed
path.
"""

import logging
import threading
from pathlib import Path
from typing import Dict, Optional, Union

logger = logging.getLogger(__name__)


class TemplateCache:
    """Thread-safe mapping of template path -> file bytes."""

    def __init__(self):
        self._entries: Dict[str, bytes] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _key(path: Union[str, Path]) -> str:
        return str(Path(path).resolve())

    def get(self, path: Union[str, Path]) -> bytes:
        """Return cached bytes, loading them from disk on first use."""
        key = self._key(path)
        with self._lock:
            cached = self._entries.get(key)
        if cached is not None:
            return cached

        data = Path(key).read_bytes()
        with self._lock:
            # Another task may have loaded it meanwhile; keep the first copy
            cached = self._entries.setdefault(key, data)
        logger.debug("Cached template %s (%d bytes)", key, len(data))
        return cached

    def invalidate(self, path: Optional[Union[str, Path]] = None) -> None:
        """Drop one entry, or every entry when path is None."""
        with self._lock:
            if path is None:
                self._entries.clear()
                logger.debug("Template cache cleared")
                return
            self._entries.pop(self._key(path), None)
        logger.debug("Template cache invalidated: %s", path)

    def __contains__(self, path: Union[str, Path]) -> bool:
        with self._lock:
            return self._key(path) in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
