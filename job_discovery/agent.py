"""
Job discovery run.

Runs: ingest configured feeds → save new jobs → load + rank for a query.
"""
from __future__ import annotations

from typing import Any

from job_discovery.config import (
    FINGERPRINTS_PATH,
    JOBS_PATH,
    dedup_ttl,
    ensure_dirs,
    fetch_timeout,
    fetch_workers,
    load_feeds,
    load_weights,
)
from job_discovery.dedup import DedupStore
from job_discovery.fetcher import FeedFetcher, HttpFeedFetcher
from job_discovery.log import get_logger
from job_discovery.models import Job, JobQuery, RankedJob
from job_discovery.pipeline import IngestionPipeline
from job_discovery.ranker import JobRanker
from job_discovery.repository import JobRepository
from job_discovery.storage import JsonFileKeyValueStore

log = get_logger(__name__)


def ingest_feeds(
    pipeline: IngestionPipeline,
    repository: JobRepository,
    feeds: list | None = None,
) -> list[Job]:
    """Run every configured feed group through *pipeline* and save the output."""
    feeds = load_feeds() if feeds is None else feeds
    new_jobs: list[Job] = []
    for feed in feeds:
        log.info("Ingesting %d %s feed(s)...", len(feed.locations), feed.source.value)
        new_jobs.extend(pipeline.ingest(feed.locations, feed.source))
    if new_jobs:
        repository.save(new_jobs)
    return new_jobs


def rank_stored(repository: JobRepository, query: JobQuery, top: int | None = None) -> list[RankedJob]:
    jobs = repository.load(query)
    ranker = JobRanker.from_jobs(jobs, weights=load_weights())
    ranked = ranker.rank(jobs, query)
    return ranked[:top] if top else ranked


def run(
    query: JobQuery,
    *,
    ingest: bool = True,
    top: int = 10,
    fetcher: FeedFetcher | None = None,
) -> dict[str, Any]:
    ensure_dirs()
    repository = JobRepository(JOBS_PATH)

    new_jobs: list[Job] = []
    if ingest:
        fetcher = fetcher or HttpFeedFetcher(timeout=fetch_timeout())
        pipeline = IngestionPipeline(
            fetcher,
            dedup=DedupStore(JsonFileKeyValueStore(FINGERPRINTS_PATH), ttl=dedup_ttl()),
            max_workers=fetch_workers(),
        )
        try:
            new_jobs = ingest_feeds(pipeline, repository)
        finally:
            fetcher.close()

    ranked = rank_stored(repository, query, top=top)
    log.info(
        "Run complete: new=%d, ranked=%d for %r",
        len(new_jobs), len(ranked), query.keywords,
    )
    return {"new_jobs": len(new_jobs), "ranked": ranked}
