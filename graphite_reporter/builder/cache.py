"""CachedAppInfoStore - TTL cache in front of another AppInfoStore.

Fails open: when the backing store errors, cached entries are served even
past their TTL, together with the error.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Sequence

from ..domain.contracts import AppInfoStore
from ..domain.models import AppInfo, LookupResult

logger = logging.getLogger(__name__)


@dataclass
class _CacheEntry:
    info: AppInfo
    stored_at: float


class CachedAppInfoStore(AppInfoStore):
    """Thread-safe TTL cache.

    Only GUIDs that are missing or expired are requested from the backing
    store.
    """

    DEFAULT_TTL = 150.0  # segundos

    def __init__(
        self,
        store: AppInfoStore,
        ttl: float = DEFAULT_TTL,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._store = store
        self._ttl = ttl
        self._clock = clock
        self._entries: Dict[str, _CacheEntry] = {}
        self._lock = threading.Lock()

        # Métricas
        self._hits = 0
        self._misses = 0
        self._stale_served = 0
        self._backend_errors = 0

    def lookup(self, guids: Sequence[str]) -> LookupResult:
        if not guids:
            return LookupResult()

        now = self._clock()
        fresh: Dict[str, AppInfo] = {}
        to_fetch: List[str] = []

        with self._lock:
            for guid in guids:
                entry = self._entries.get(guid)
                if entry is not None and now - entry.stored_at < self._ttl:
                    fresh[guid] = entry.info
                    self._hits += 1
                else:
                    to_fetch.append(guid)
                    self._misses += 1

        if not to_fetch:
            return LookupResult(apps=fresh)

        result = self._store.lookup(to_fetch)

        fetched = result.apps or {}
        with self._lock:
            stored_at = self._clock()
            for guid, info in fetched.items():
                self._entries[guid] = _CacheEntry(info=info, stored_at=stored_at)

            for guid in to_fetch:
                if guid in fetched:
                    fresh[guid] = fetched[guid]
                elif result.error is not None and guid in self._entries:
                    fresh[guid] = self._entries[guid].info
                    self._stale_served += 1

            if result.error is None:
                return LookupResult(apps=fresh)
            self._backend_errors += 1

        logger.warning(
            "CachedAppInfoStore backend failed, serving cache (%d apps): %s",
            len(fresh), result.error,
        )
        return LookupResult(apps=fresh, error=result.error)

    def get_stats(self) -> dict:
        with self._lock:
            return {
                "size": len(self._entries),
                "hits": self._hits,
                "misses": self._misses,
                "stale_served": self._stale_served,
                "backend_errors": self._backend_errors,
                "ttl_seconds": self._ttl,
            }
