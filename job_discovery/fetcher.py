"""Feed fetchers: raw bytes for a feed location."""
from __future__ import annotations

from abc import ABC, abstractmethod

import requests

from job_discovery.exceptions import FeedFetchError
from job_discovery.log import get_logger
from job_discovery.retry import retry

log = get_logger(__name__)

USER_AGENT = "job-discovery/0.1"


class FeedFetcher(ABC):
    @abstractmethod
    def fetch(self, location: str) -> bytes:
        pass

    def close(self) -> None:
        """Release any pooled connections."""


class HttpFeedFetcher(FeedFetcher):
    """Fetch feeds over HTTP(S) with a pooled ``requests`` session."""

    def __init__(self, timeout: float = 15.0, session: requests.Session | None = None) -> None:
        self.timeout = timeout
        self._owns_session = session is None
        self.session = session or requests.Session()
        if self._owns_session:
            self.session.headers["User-Agent"] = USER_AGENT

    @retry(max_attempts=3, base_delay=1.5, retryable=(requests.RequestException, OSError))
    def _get(self, location: str) -> bytes:
        with self.session.get(location, timeout=self.timeout) as r:
            if r.status_code >= 400:
                # 4xx will not get better on retry
                if r.status_code < 500:
                    raise FeedFetchError(location, r.status_code, r.reason or "")
                r.raise_for_status()
            return r.content

    def fetch(self, location: str) -> bytes:
        data = self._get(location)
        log.debug("Fetched %d bytes from %s", len(data), location)
        return data

    def close(self) -> None:
        if self._owns_session:
            self.session.close()
