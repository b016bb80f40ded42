"""Rank jobs against a query with a weighted multi-factor score."""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Iterable

from job_discovery.log import get_logger
from job_discovery.models import Job, JobQuery, JobSource, RankedJob, RankingWeights
from job_discovery.tfidf import TfidfScorer

log = get_logger(__name__)

SOURCE_AUTHORITY: dict[JobSource, float] = {
    JobSource.LINKEDIN: 1.0,
    JobSource.INDEED: 0.9,
    JobSource.GLASSDOOR: 0.8,
    JobSource.MONSTER: 0.7,
    JobSource.CUSTOM: 0.5,
}
DEFAULT_SOURCE_AUTHORITY = 0.5

RECENCY_DECAY_DAYS = 30.0
_SECONDS_PER_DAY = 24 * 60 * 60


def source_authority(source: JobSource) -> float:
    return SOURCE_AUTHORITY.get(source, DEFAULT_SOURCE_AUTHORITY)


def recency(posted_at: datetime, now: datetime) -> float:
    """``exp(-days / 30)``.

    Not clamped: a posting dated in the future has negative age and scores
    above 1.0.
    """
    if posted_at.tzinfo is None:
        posted_at = posted_at.replace(tzinfo=timezone.utc)
    days = (now - posted_at).total_seconds() / _SECONDS_PER_DAY
    return math.exp(-days / RECENCY_DECAY_DAYS)


@dataclass(frozen=True)
class ScoreBreakdown:
    title: float
    description: float
    company: float
    recency: float
    source: float

    @property
    def total(self) -> float:
        return self.title + self.description + self.company + self.recency + self.source

    def explain(self) -> str:
        return "\n".join(
            [
                f"Title: {self.title:.2f}",
                f"Description: {self.description:.2f}",
                f"Company: {self.company:.2f}",
                f"Recency: {self.recency:.2f}",
                f"Source: {self.source:.2f}",
            ]
        )


class JobRanker:
    """Composite relevance ranking.

    Per job: TF-IDF of the query keywords against title, description and
    company, plus recency decay and source authority, each multiplied by its
    weight. Jobs are scored independently and there is no normalization across
    a batch, so scores have no fixed upper bound.
    """

    def __init__(
        self,
        weights: RankingWeights | None = None,
        corpus: Iterable[str] = (),
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.weights = weights or RankingWeights()
        self.scorer = TfidfScorer(corpus)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    @classmethod
    def from_jobs(
        cls,
        jobs: Iterable[Job],
        weights: RankingWeights | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> JobRanker:
        """Build the IDF corpus from each job's title, description and company."""
        corpus = [f"{j.title} {j.description} {j.company}" for j in jobs]
        return cls(weights=weights, corpus=corpus, clock=clock)

    def breakdown(self, job: Job, query: JobQuery, now: datetime | None = None) -> ScoreBreakdown:
        w = self.weights
        kw = query.keywords
        now = now or self._clock()
        return ScoreBreakdown(
            title=self.scorer.score(kw, job.title) * w.title,
            description=self.scorer.score(kw, job.description) * w.description,
            company=self.scorer.score(kw, job.company) * w.company,
            recency=recency(job.posted_at, now) * w.recency,
            source=source_authority(job.source) * w.source,
        )

    def rank_job(self, job: Job, query: JobQuery, now: datetime | None = None) -> RankedJob:
        parts = self.breakdown(job, query, now)
        return RankedJob(job=job, score=parts.total, explanation=parts.explain())

    def rank(self, jobs: Iterable[Job], query: JobQuery) -> list[RankedJob]:
        # one clock reading per call keeps recency comparable across the batch
        now = self._clock()
        ranked = [self.rank_job(j, query, now) for j in jobs]
        ranked.sort(key=lambda r: -r.score)
        log.debug("Ranked %d job(s) for %r", len(ranked), query.keywords)
        return ranked
