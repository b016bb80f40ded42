"""Shared fixtures: fixed clock, feed documents and an in-memory fetcher."""
import os
from datetime import datetime, timezone

import pytest

os.environ.setdefault("LOG_TO_FILE", "false")

from job_discovery.fetcher import FeedFetcher  # noqa: E402

NOW = datetime(2026, 1, 10, 12, 0, 0, tzinfo=timezone.utc)


def rss(*items: str) -> bytes:
    body = "".join(items)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<rss version="2.0"><channel><title>Jobs</title>'
        f"{body}"
        "</channel></rss>"
    ).encode("utf-8")


def rss_item(title: str, description: str = "", link: str = "", pub_date: str = "") -> str:
    parts = [f"<title>{title}</title>"]
    if description:
        parts.append(f"<description>{description}</description>")
    if link:
        parts.append(f"<link>{link}</link>")
    if pub_date:
        parts.append(f"<pubDate>{pub_date}</pubDate>")
    return "<item>" + "".join(parts) + "</item>"


class FakeFetcher(FeedFetcher):
    """Serves canned bytes per location; an Exception value is raised instead."""

    def __init__(self, responses: dict):
        self.responses = responses
        self.calls: list[str] = []
        self.closed = False

    def fetch(self, location: str) -> bytes:
        self.calls.append(location)
        value = self.responses[location]
        if isinstance(value, BaseException):
            raise value
        return value

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    return lambda: NOW
