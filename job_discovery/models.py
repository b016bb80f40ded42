"""Data models for postings, queries and ranking results."""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from functools import total_ordering
from typing import Any, Mapping


class JobSource(str, Enum):
    LINKEDIN = "linkedin"
    INDEED = "indeed"
    GLASSDOOR = "glassdoor"
    MONSTER = "monster"
    CUSTOM = "custom"


class SalaryPeriod(str, Enum):
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


def _new_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Salary:
    min: int | None = None
    max: int | None = None
    currency: str = "USD"
    period: SalaryPeriod = SalaryPeriod.YEARLY

    def to_dict(self) -> dict[str, Any]:
        return {
            "min": self.min,
            "max": self.max,
            "currency": self.currency,
            "period": self.period.value,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Salary:
        return cls(
            min=data.get("min"),
            max=data.get("max"),
            currency=data.get("currency", "USD"),
            period=SalaryPeriod(data.get("period", SalaryPeriod.YEARLY.value)),
        )


@dataclass(frozen=True)
class Job:
    """A job posting.

    Instances are immutable; use ``dataclasses.replace`` to derive an edited
    copy. ``id`` is generated once and carried through every copy, ``url`` is
    the key the job repository upserts on.
    """

    title: str
    company: str
    description: str
    url: str
    source: JobSource = JobSource.CUSTOM
    posted_at: datetime = field(default_factory=_utcnow)
    location: str | None = None
    salary: Salary | None = None
    id: str = field(default_factory=_new_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "company": self.company,
            "description": self.description,
            "location": self.location,
            "salary": self.salary.to_dict() if self.salary else None,
            "posted_at": self.posted_at.isoformat(),
            "url": self.url,
            "source": self.source.value,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Job:
        posted_at = datetime.fromisoformat(data["posted_at"])
        if posted_at.tzinfo is None:
            posted_at = posted_at.replace(tzinfo=timezone.utc)
        salary = data.get("salary")
        return cls(
            id=data["id"],
            title=data["title"],
            company=data["company"],
            description=data["description"],
            location=data.get("location"),
            salary=Salary.from_dict(salary) if salary else None,
            posted_at=posted_at,
            url=data["url"],
            source=JobSource(data.get("source", JobSource.CUSTOM.value)),
        )


@dataclass(frozen=True)
class JobQuery:
    """Search intent. Empty ``keywords`` means no keyword filter."""

    keywords: str = ""
    location: str | None = None
    remote: bool = False
    salary_min: int | None = None


@total_ordering
@dataclass(frozen=True, eq=False)
class RankedJob:
    """A job with its composite score and per-factor explanation.

    Equality and ordering look at the score only, highest first, so
    ``sorted(ranked)`` lists the best match at index 0 and two different jobs
    with the same score compare equal.
    """

    job: Job
    score: float
    explanation: str = ""

    @property
    def id(self) -> str:
        return self.job.id

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RankedJob):
            return NotImplemented
        return self.score == other.score

    def __hash__(self) -> int:
        return hash(self.score)

    def __lt__(self, other: RankedJob) -> bool:
        if not isinstance(other, RankedJob):
            return NotImplemented
        return self.score > other.score


@dataclass(frozen=True)
class RankingWeights:
    """Coefficients of the composite score.

    The engine does not rescale them; the defaults sum to 1.0.
    """

    title: float = 0.4
    description: float = 0.3
    company: float = 0.1
    recency: float = 0.1
    source: float = 0.1

    def __post_init__(self) -> None:
        for name in ("title", "description", "company", "recency", "source"):
            if getattr(self, name) < 0:
                raise ValueError(f"ranking weight {name!r} must be non-negative")

    @property
    def total(self) -> float:
        return self.title + self.description + self.company + self.recency + self.source

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> RankingWeights:
        if not data:
            return cls()
        known = {"title", "description", "company", "recency", "source"}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"unknown ranking weight(s): {', '.join(sorted(unknown))}")
        return cls(**{k: float(v) for k, v in data.items()})
