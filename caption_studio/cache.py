"""
Thread-safe in-memory TTL cache used to optionally hold parsed reference captions.
"""
import time
import threading
from typing import Any, Callable, Dict, Optional, Tuple


class TTLCache:
    """
    Time-To-Live cache with dict storage of {key: (expires_at, value)}.
    Expired entries are purged on every get/set.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._storage: Dict[str, Tuple[float, Any]] = {}
        self._lock = threading.Lock()
        self._clock = clock

    def get(self, key: str) -> Optional[Any]:
        """
        Return the cached value, or None if missing or expired.
        """
        with self._lock:
            self._purge_expired()
            entry = self._storage.get(key)
            return entry[1] if entry else None

    def set(self, key: str, value: Any, ttl: int) -> None:
        """
        Store value under key for ttl seconds.
        """
        with self._lock:
            self._purge_expired()
            self._storage[key] = (self._clock() + ttl, value)

    def delete(self, key: str) -> None:
        with self._lock:
            self._storage.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._storage.clear()

    def __len__(self) -> int:
        with self._lock:
            self._purge_expired()
            return len(self._storage)

    def _purge_expired(self) -> None:
        # caller holds the lock
        now = self._clock()
        expired = [key for key, (expires_at, _) in self._storage.items() if now >= expires_at]
        for key in expired:
            del self._storage[key]
