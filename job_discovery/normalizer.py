"""Trim free-text fields so downstream comparison and display are consistent."""
from __future__ import annotations

from dataclasses import replace

from job_discovery.models import Job


def _clean(value: str) -> str:
    return (value or "").strip()


def normalize(job: Job) -> Job:
    """Return a copy of *job* with whitespace trimmed from its text fields.

    Idempotent; id, url, salary, date and source pass through untouched.
    """
    return replace(
        job,
        title=_clean(job.title),
        company=_clean(job.company),
        description=_clean(job.description),
        location=job.location.strip() if job.location is not None else None,
    )
