"""Content fingerprints used to suppress duplicate postings."""
from __future__ import annotations

import hashlib
import re

from job_discovery.models import Job

KEY_PREFIX = "fingerprint_"

_WS_RE = re.compile(r"\s+")


def _canonical(text: str) -> str:
    return _WS_RE.sub(" ", (text or "").strip().lower())


def fingerprint(title: str, company: str) -> str:
    """sha256 digest of the normalized (title, company) pair."""
    joined = f"{_canonical(title)}|{_canonical(company)}"
    return hashlib.sha256(joined.encode("utf-8")).hexdigest()


def fingerprint_key(job: Job) -> str:
    """Store key for *job*; URL, date and source do not contribute."""
    return KEY_PREFIX + fingerprint(job.title, job.company)
