"""JSON-file job repository keyed by canonical URL."""
from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Iterable

from job_discovery.log import get_logger
from job_discovery.models import Job, JobQuery
from job_discovery.storage import lock_file, unlock_file

log = get_logger(__name__)


def matches(job: Job, query: JobQuery) -> bool:
    """Apply the structured filters of *query*; keywords are left to ranking."""
    loc = (job.location or "").lower()
    if query.location and query.location.strip().lower() not in loc:
        return False
    if query.remote and "remote" not in loc:
        return False
    if query.salary_min is not None:
        if job.salary is None:
            return False
        best = job.salary.max if job.salary.max is not None else job.salary.min
        if best is None or best < query.salary_min:
            return False
    return True


class JobRepository:
    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read(self) -> list[dict]:
        if not self.path.exists():
            return []
        with open(self.path, "r", encoding="utf-8") as f:
            lock_file(f, exclusive=False)
            try:
                raw = f.read()
            finally:
                unlock_file(f)
        return json.loads(raw) if raw.strip() else []

    def _write(self, rows: list[dict]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            lock_file(f)
            try:
                json.dump(rows, f, indent=2, ensure_ascii=False)
            finally:
                unlock_file(f)

    def save(self, jobs: Iterable[Job]) -> int:
        """Upsert by URL. A job already stored under the same URL keeps its id.

        Returns the number of rows written.
        """
        with self._lock:
            rows = self._read()
            by_url = {r["url"]: i for i, r in enumerate(rows)}
            written = 0
            for job in jobs:
                row = job.to_dict()
                idx = by_url.get(job.url)
                if idx is None:
                    by_url[job.url] = len(rows)
                    rows.append(row)
                else:
                    row["id"] = rows[idx]["id"]
                    rows[idx] = row
                written += 1
            if written:
                self._write(rows)
        log.info("Saved %d job(s) → %s", written, self.path.name)
        return written

    def load(self, query: JobQuery | None = None) -> list[Job]:
        with self._lock:
            rows = self._read()
        jobs = [Job.from_dict(r) for r in rows]
        if query is not None:
            jobs = [j for j in jobs if matches(j, query)]
        return jobs

    def delete(self, url: str) -> bool:
        with self._lock:
            rows = self._read()
            kept = [r for r in rows if r["url"] != url]
            if len(kept) == len(rows):
                return False
            self._write(kept)
        log.debug("Deleted %s", url)
        return True
