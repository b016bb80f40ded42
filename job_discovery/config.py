"""Load feed and ranking configuration plus env settings."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from job_discovery.log import get_logger
from job_discovery.models import JobSource, RankingWeights

log = get_logger(__name__)

load_dotenv()

ROOT_DIR: Path = Path(__file__).resolve().parent.parent
CONFIG_DIR: Path = ROOT_DIR / "config"
FEEDS_PATH: Path = CONFIG_DIR / "feeds.yaml"
DATA_DIR: Path = ROOT_DIR / "data"
JOBS_PATH: Path = DATA_DIR / "jobs.json"
FINGERPRINTS_PATH: Path = DATA_DIR / "fingerprints.json"


@dataclass(frozen=True)
class FeedConfig:
    source: JobSource
    locations: list[str] = field(default_factory=list)


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        log.warning("Config file not found: %s", path)
        return {}
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return data or {}


def load_feeds(path: Path | None = None) -> list[FeedConfig]:
    """Feed locations grouped by source.

    Expected shape::

        feeds:
          linkedin:
            - https://example.org/jobs.rss
          custom:
            - https://example.org/atom.xml
    """
    data = _load_yaml(path or FEEDS_PATH)
    feeds: list[FeedConfig] = []
    for name, locations in (data.get("feeds") or {}).items():
        try:
            source = JobSource(str(name).lower())
        except ValueError:
            log.warning("Unknown feed source %r, treating as custom", name)
            source = JobSource.CUSTOM
        locs = [str(loc).strip() for loc in (locations or []) if str(loc).strip()]
        if locs:
            feeds.append(FeedConfig(source=source, locations=locs))
    return feeds


def load_weights(path: Path | None = None) -> RankingWeights:
    data = _load_yaml(path or FEEDS_PATH)
    return RankingWeights.from_mapping((data.get("ranking") or {}).get("weights"))


def dedup_ttl() -> timedelta | None:
    """``DEDUP_TTL_DAYS`` as a timedelta; unset or empty means never expire."""
    raw = get_env("DEDUP_TTL_DAYS")
    if not raw:
        return None
    try:
        days = float(raw)
    except ValueError:
        log.warning("Ignoring invalid DEDUP_TTL_DAYS=%r", raw)
        return None
    return timedelta(days=days) if days > 0 else None


def fetch_timeout() -> float:
    raw = get_env("FETCH_TIMEOUT", "15")
    try:
        return float(raw)
    except ValueError:
        log.warning("Ignoring invalid FETCH_TIMEOUT=%r", raw)
        return 15.0


def fetch_workers() -> int:
    raw = get_env("FETCH_WORKERS", "1")
    try:
        return max(1, int(raw))
    except ValueError:
        return 1


def ensure_dirs() -> None:
    for d in (CONFIG_DIR, DATA_DIR):
        d.mkdir(parents=True, exist_ok=True)
