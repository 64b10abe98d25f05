"""
In-process read cache keyed by request path.

Read endpoints store their payload under the path they serve; mutations
call ``revalidate_path`` so the next read goes back to Supabase.
"""

import logging
import threading
import time
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

from app.core.config import settings

logger = logging.getLogger(__name__)


class PathCache:
    def __init__(self, ttl: float):
        self.ttl = ttl
        self._entries: Dict[Tuple[str, Hashable], Tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def get(self, path: str, key: Hashable = None) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get((path, key))
            if entry is None:
                return None

            expires_at, value = entry
            if expires_at < time.monotonic():
                del self._entries[(path, key)]
                return None

            return value

    def set(self, path: str, key: Hashable, value: Any) -> None:
        if self.ttl <= 0:
            return
        now = time.monotonic()
        with self._lock:
            expired = [k for k, (expires_at, _) in self._entries.items() if expires_at < now]
            for k in expired:
                del self._entries[k]

            self._entries[(path, key)] = (now + self.ttl, value)

    def get_or_set(self, path: str, key: Hashable, loader: Callable[[], Any]) -> Any:
        cached = self.get(path, key)
        if cached is not None:
            return cached

        value = loader()
        self.set(path, key, value)
        return value

    def revalidate(self, path: str = "/") -> int:
        prefix = path.rstrip("/")
        with self._lock:
            stale = [
                k for k in self._entries
                if k[0] == path or k[0].startswith(prefix + "/")
            ]
            for k in stale:
                del self._entries[k]

        logger.debug(f"Revalidated {path}: {len(stale)} entries dropped")
        return len(stale)

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


cache = PathCache(ttl=settings.CACHE_TTL)


def revalidate_path(path: str = "/") -> int:
    return cache.revalidate(path)
