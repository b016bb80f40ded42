"""Ingestion: fetch feeds, parse, normalize and drop already-seen postings."""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Iterable, Iterator

from job_discovery.dedup import DedupStore
from job_discovery.exceptions import FeedParseError
from job_discovery.feed_parser import FeedParser
from job_discovery.fetcher import FeedFetcher
from job_discovery.log import get_logger
from job_discovery.models import Job, JobSource
from job_discovery.normalizer import normalize

log = get_logger(__name__)


@dataclass
class IngestionStats:
    fetched_sources: int = 0
    failed_sources: int = 0
    parsed: int = 0
    emitted: int = 0
    duplicates: int = 0


@dataclass
class _SourceResult:
    location: str
    jobs: list[Job]
    error: BaseException | None = None
    stage: str = ""


class IngestionPipeline:
    """Produce unique jobs from a list of feed locations.

    ``ingest`` returns a single-pass generator; calling it again fetches and
    filters everything from scratch. A location that fails to fetch or parse
    is logged and skipped. Closing the generator early stops the run; any
    fingerprints claimed so far stay claimed.

    With ``max_workers > 1`` locations are fetched and parsed concurrently and
    merged in completion order. Dedup claims always happen on the consuming
    thread through ``DedupStore.claim``, which is atomic. Closing a parallel
    run cancels locations not yet started and blocks until running fetches
    return (at most the fetch timeout times its retries).
    """

    def __init__(
        self,
        fetcher: FeedFetcher,
        parser: FeedParser | None = None,
        dedup: DedupStore | None = None,
        max_workers: int = 1,
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.fetcher = fetcher
        self.parser = parser or FeedParser()
        self.dedup = dedup or DedupStore()
        self.max_workers = max_workers
        self.stats = IngestionStats()

    def ingest(self, locations: Iterable[str], source: JobSource) -> Iterator[Job]:
        self.stats = IngestionStats()
        locations = list(locations)
        if self.max_workers > 1 and len(locations) > 1:
            jobs = self._ingest_parallel(locations, source)
        else:
            jobs = self._ingest_sequential(locations, source)

        finished = False
        try:
            yield from jobs
            finished = True
        finally:
            jobs.close()
            s = self.stats
            if finished:
                log.info(
                    "Ingested %s: %d source(s) ok, %d failed, %d parsed, %d new, %d duplicate",
                    source.value, s.fetched_sources, s.failed_sources,
                    s.parsed, s.emitted, s.duplicates,
                )
            else:
                log.info("Ingestion of %s stopped by consumer after %d job(s)", source.value, s.emitted)

    def _admit(self, job: Job) -> Job | None:
        self.stats.parsed += 1
        job = normalize(job)
        if not self.dedup.claim(job):
            self.stats.duplicates += 1
            log.debug("Duplicate skipped: %s @ %s", job.title, job.company)
            return None
        self.stats.emitted += 1
        return job

    def _source_failed(self, location: str, stage: str, exc: BaseException) -> None:
        self.stats.failed_sources += 1
        if isinstance(exc, FeedParseError):
            exc.location = exc.location or location
            log.warning("[%s] %s failed: %s", location, stage, exc)
        else:
            log.error("[%s] %s failed: %s", location, stage, exc)

    def _ingest_sequential(self, locations: list[str], source: JobSource) -> Iterator[Job]:
        for location in locations:
            try:
                data = self.fetcher.fetch(location)
            except Exception as exc:
                self._source_failed(location, "fetch", exc)
                continue
            self.stats.fetched_sources += 1

            candidates = self.parser.iter_jobs(data, source)
            while True:
                try:
                    job = next(candidates)
                except StopIteration:
                    break
                except Exception as exc:
                    self._source_failed(location, "parse", exc)
                    break
                admitted = self._admit(job)
                if admitted is not None:
                    yield admitted

    def _load_source(self, location: str, source: JobSource) -> _SourceResult:
        try:
            data = self.fetcher.fetch(location)
        except Exception as exc:
            return _SourceResult(location, [], exc, "fetch")
        jobs: list[Job] = []
        try:
            for job in self.parser.iter_jobs(data, source):
                jobs.append(job)
        except Exception as exc:
            # keep what parsed before the failure
            return _SourceResult(location, jobs, exc, "parse")
        return _SourceResult(location, jobs)

    def _ingest_parallel(self, locations: list[str], source: JobSource) -> Iterator[Job]:
        pool = ThreadPoolExecutor(max_workers=min(self.max_workers, len(locations)))
        try:
            futures = [pool.submit(self._load_source, loc, source) for loc in locations]
            for future in as_completed(futures):
                result = future.result()
                if result.stage != "fetch":
                    self.stats.fetched_sources += 1
                if result.error is not None:
                    self._source_failed(result.location, result.stage, result.error)
                for job in result.jobs:
                    admitted = self._admit(job)
                    if admitted is not None:
                        yield admitted
        finally:
            # queued locations are dropped; running fetches finish before the
            # caller can close the fetcher's session
            pool.shutdown(wait=True, cancel_futures=True)
