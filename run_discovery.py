#!/usr/bin/env python3
"""Entry point: ingest configured feeds, then rank stored jobs for a query.

Examples:
    python run_discovery.py "swift ios"
    python run_discovery.py "data engineer" --remote --salary-min 120000 --top 20
    python run_discovery.py "backend" --no-ingest
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

from job_discovery.config import FEEDS_PATH
from job_discovery.log import get_logger
from job_discovery.models import JobQuery

log = get_logger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Ingest job feeds and rank postings for a query.")
    p.add_argument("keywords", nargs="?", default="", help="Free-text keywords (empty ranks everything).")
    p.add_argument("--location", default=None, help="Only jobs whose location contains this text.")
    p.add_argument("--remote", action="store_true", help="Only remote jobs.")
    p.add_argument("--salary-min", type=int, default=None, help="Minimum salary floor.")
    p.add_argument("--top", type=int, default=10, help="How many results to show.")
    p.add_argument("--no-ingest", action="store_true", help="Skip feed ingestion, rank stored jobs only.")
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    if not args.no_ingest and not FEEDS_PATH.exists():
        print()
        print(f"  No feed config found at {FEEDS_PATH}.")
        print("  Add feeds there or run with --no-ingest.")
        print()
        return 1

    from job_discovery.agent import run

    query = JobQuery(
        keywords=args.keywords,
        location=args.location,
        remote=args.remote,
        salary_min=args.salary_min,
    )
    result = run(query, ingest=not args.no_ingest, top=args.top)

    log.info("New jobs ingested: %d", result["new_jobs"])
    for i, r in enumerate(result["ranked"], 1):
        log.info("%2d. %.3f  %s @ %s  <%s>", i, r.score, r.job.title, r.job.company, r.job.url)
        for line in r.explanation.splitlines():
            log.debug("      %s", line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
