"""Seen-fingerprint set used by ingestion to drop repeated postings."""
from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone
from typing import Callable

from job_discovery.fingerprint import fingerprint_key
from job_discovery.log import get_logger
from job_discovery.models import Job
from job_discovery.storage import InMemoryKeyValueStore, KeyValueStore

log = get_logger(__name__)


class DedupStore:
    """Fingerprint set over a ``KeyValueStore``.

    Each stored value is the ISO timestamp of the first sighting. With
    ``ttl=None`` the set only ever grows; with a ttl, a fingerprint older than
    the window counts as unseen so a re-advertised role can come through again.
    """

    def __init__(
        self,
        store: KeyValueStore | None = None,
        ttl: timedelta | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.store = store if store is not None else InMemoryKeyValueStore()
        self.ttl = ttl
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._lock = threading.Lock()

    def _expired(self, stamp: str | None) -> bool:
        if self.ttl is None or stamp is None:
            return False
        try:
            seen_at = datetime.fromisoformat(stamp)
        except ValueError:
            # Values written by other tools are treated as permanent
            return False
        if seen_at.tzinfo is None:
            seen_at = seen_at.replace(tzinfo=timezone.utc)
        return self._clock() - seen_at >= self.ttl

    def exists(self, key: str) -> bool:
        stamp = self.store.load(key)
        return stamp is not None and not self._expired(stamp)

    def persist(self, key: str) -> None:
        self.store.save(key, self._clock().isoformat())

    def claim_key(self, key: str) -> bool:
        """Atomically mark *key* as seen. True if it was not seen before."""
        stamp = self._clock().isoformat()
        with self._lock:
            if self.store.add_if_absent(key, stamp):
                return True
            if self._expired(self.store.load(key)):
                log.debug("Fingerprint %s outside dedup window, re-admitting", key)
                self.store.save(key, stamp)
                return True
            return False

    def claim(self, job: Job) -> bool:
        return self.claim_key(fingerprint_key(job))
