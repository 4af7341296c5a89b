from __future__ import annotations

import json
import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple, TypeVar

from .config import CacheConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class SnapshotCache:
    """TTL cache for fetched snapshots, owned by whoever creates it.

    Entries are keyed by (query_type, parameters). Nothing here is shared at
    module level; two caches never see each other's entries.
    """

    config: CacheConfig
    clock: Callable[[], float] = time.monotonic
    _entries: Dict[Tuple[str, str], Tuple[float, Any]] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @staticmethod
    def key(query_type: str, params: Optional[Dict[str, Any]] = None) -> Tuple[str, str]:
        return query_type, json.dumps(params or {}, sort_keys=True, default=str)

    def get(self, query_type: str, params: Optional[Dict[str, Any]] = None) -> Optional[Any]:
        if not self.config.enabled:
            return None
        key = self.key(query_type, params)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if self.clock() >= expires_at:
                self._entries.pop(key, None)
                return None
            return value

    def put(self, query_type: str, params: Optional[Dict[str, Any]], value: Any) -> None:
        if not self.config.enabled:
            return
        key = self.key(query_type, params)
        with self._lock:
            self._entries[key] = (self.clock() + self.config.ttl_s, value)

    def get_or_load(
        self,
        query_type: str,
        params: Optional[Dict[str, Any]],
        loader: Callable[[], T],
    ) -> T:
        cached = self.get(query_type, params)
        if cached is not None:
            logger.debug("Cache hit for %s %s", query_type, params)
            return cached
        value = loader()
        self.put(query_type, params, value)
        return value

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
