"""Process-local TTL cache for read-heavy public data."""

import threading
import time
from typing import Any, Callable, Optional

from coursehub.config import settings


class MemoryCache:
    def __init__(self, default_ttl: Optional[int] = None):
        self._default_ttl = default_ttl
        self._store: dict[str, tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def _ttl(self, ttl: Optional[int]) -> int:
        if ttl is not None:
            return ttl
        if self._default_ttl is not None:
            return self._default_ttl
        return settings.CACHE_TTL_SECONDS

    def get(self, key: str) -> Any:
        with self._lock:
            item = self._store.get(key)
            if item is None:
                return None
            expires_at, value = item
            if expires_at < time.monotonic():
                del self._store[key]
                return None
            return value

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        with self._lock:
            self._store[key] = (time.monotonic() + self._ttl(ttl), value)

    def get_or_set(self, key: str, factory: Callable[[], Any], ttl: Optional[int] = None) -> Any:
        value = self.get(key)
        if value is None:
            value = factory()
            self.set(key, value, ttl)
        return value

    def delete(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    def invalidate_prefix(self, prefix: str) -> int:
        with self._lock:
            keys = [k for k in self._store if k.startswith(prefix)]
            for k in keys:
                del self._store[k]
            return len(keys)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()


api_cache = MemoryCache()

COURSES_PREFIX = "courses:"
SETTINGS_KEY = "settings:main"
