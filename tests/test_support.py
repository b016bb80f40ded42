"""Unit tests for retry, the HTTP fetcher, configuration loading and logging."""

import logging
from datetime import datetime, timedelta

import pytest
import requests

from job_discovery import config, log
from job_discovery.exceptions import FeedFetchError, FeedParseError
from job_discovery.fetcher import USER_AGENT, HttpFeedFetcher
from job_discovery.models import JobSource, RankingWeights
from job_discovery.retry import backoff_delay, retry


# ── retry ────────────────────────────────────────────────────────────────


@pytest.mark.unit
def test_retry_succeeds_after_transient_failures():
    sleeps = []
    calls = {"n": 0}

    @retry(max_attempts=3, base_delay=1.0, jitter=False, retryable=(OSError,), sleep=sleeps.append)
    def flaky():
        calls["n"] += 1
        if calls["n"] < 3:
            raise OSError("reset")
        return "ok"

    assert flaky() == "ok"
    assert sleeps == [1.0, 2.0]


@pytest.mark.unit
def test_retry_reraises_after_last_attempt():
    sleeps = []

    @retry(max_attempts=2, jitter=False, retryable=(OSError,), sleep=sleeps.append)
    def always_fails():
        raise OSError("down")

    with pytest.raises(OSError, match="down"):
        always_fails()
    assert len(sleeps) == 1


@pytest.mark.unit
def test_retry_does_not_catch_other_errors():
    sleeps = []

    @retry(max_attempts=5, retryable=(OSError,), sleep=sleeps.append)
    def bad():
        raise KeyError("nope")

    with pytest.raises(KeyError):
        bad()
    assert sleeps == []


@pytest.mark.unit
def test_backoff_is_capped():
    assert backoff_delay(10, base_delay=1.0, max_delay=30.0, backoff_factor=2.0, jitter=False) == 30.0


@pytest.mark.unit
def test_retry_rejects_zero_attempts():
    with pytest.raises(ValueError):
        retry(max_attempts=0)


# ── fetcher ──────────────────────────────────────────────────────────────


class _Response:
    def __init__(self, status_code=200, content=b"", reason="OK"):
        self.status_code = status_code
        self.content = content
        self.reason = reason
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.closed = True
        return False

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} {self.reason}")


class _Session:
    def __init__(self, response):
        self.response = response
        self.headers = {}
        self.requests = []
        self.closed = False

    def get(self, url, timeout):
        self.requests.append((url, timeout))
        return self.response

    def close(self):
        self.closed = True


@pytest.mark.unit
def test_http_fetcher_returns_body_and_closes_response():
    response = _Response(content=b"<rss/>")
    session = _Session(response)
    fetcher = HttpFeedFetcher(timeout=5, session=session)

    assert fetcher.fetch("https://feeds.example/jobs.rss") == b"<rss/>"
    assert session.requests == [("https://feeds.example/jobs.rss", 5)]
    assert response.closed


@pytest.mark.unit
def test_http_fetcher_client_error_is_not_retried():
    session = _Session(_Response(status_code=404, reason="Not Found"))
    fetcher = HttpFeedFetcher(session=session)

    with pytest.raises(FeedFetchError) as info:
        fetcher.fetch("https://feeds.example/missing.rss")

    assert info.value.status == 404
    assert len(session.requests) == 1


@pytest.mark.unit
def test_http_fetcher_leaves_borrowed_session_open():
    session = _Session(_Response())
    HttpFeedFetcher(session=session).close()
    assert not session.closed


@pytest.mark.unit
def test_http_fetcher_owns_default_session():
    fetcher = HttpFeedFetcher()
    assert fetcher.session.headers["User-Agent"] == USER_AGENT
    fetcher.close()


@pytest.mark.unit
def test_parse_error_message_includes_location():
    err = FeedParseError("no element found", location="https://feeds.example/a.rss")
    assert str(err) == "https://feeds.example/a.rss: no element found"
    assert isinstance(err, ValueError)


# ── config ───────────────────────────────────────────────────────────────


FEEDS_YAML = """
feeds:
  linkedin:
    - https://feeds.example/linkedin.rss
  Indeed:
    - https://feeds.example/indeed.rss
    - ""
  dice:
    - https://feeds.example/dice.rss
  monster: []
ranking:
  weights:
    title: 0.5
    recency: 0.2
"""


@pytest.mark.unit
def test_load_feeds(tmp_path):
    path = tmp_path / "feeds.yaml"
    path.write_text(FEEDS_YAML)

    feeds = config.load_feeds(path)

    assert [(f.source, f.locations) for f in feeds] == [
        (JobSource.LINKEDIN, ["https://feeds.example/linkedin.rss"]),
        (JobSource.INDEED, ["https://feeds.example/indeed.rss"]),
        (JobSource.CUSTOM, ["https://feeds.example/dice.rss"]),
    ]


@pytest.mark.unit
def test_load_feeds_missing_file(tmp_path):
    assert config.load_feeds(tmp_path / "nope.yaml") == []


@pytest.mark.unit
def test_load_weights(tmp_path):
    path = tmp_path / "feeds.yaml"
    path.write_text(FEEDS_YAML)

    assert config.load_weights(path) == RankingWeights(title=0.5, recency=0.2)
    assert config.load_weights(tmp_path / "nope.yaml") == RankingWeights()


@pytest.mark.unit
@pytest.mark.parametrize(
    "raw,expected",
    [("", None), ("0", None), ("abc", None), ("14", timedelta(days=14)), ("0.5", timedelta(hours=12))],
)
def test_dedup_ttl(monkeypatch, raw, expected):
    monkeypatch.setenv("DEDUP_TTL_DAYS", raw)
    assert config.dedup_ttl() == expected


@pytest.mark.unit
def test_fetch_settings(monkeypatch):
    monkeypatch.setenv("FETCH_TIMEOUT", "3.5")
    monkeypatch.setenv("FETCH_WORKERS", "4")
    assert config.fetch_timeout() == 3.5
    assert config.fetch_workers() == 4

    monkeypatch.setenv("FETCH_TIMEOUT", "soon")
    monkeypatch.setenv("FETCH_WORKERS", "-2")
    assert config.fetch_timeout() == 15.0
    assert config.fetch_workers() == 1


# ── Logging ───────────────────────────────────────────────────────────────


@pytest.mark.unit
def test_log_file_path_is_daily_and_honours_log_dir(monkeypatch, tmp_path):
    monkeypatch.setenv("LOG_DIR", str(tmp_path))
    path = log.log_file_path(datetime(2026, 1, 10))
    assert path == tmp_path / "discovery_2026-01-10.log"

    monkeypatch.delenv("LOG_DIR")
    assert log.log_file_path(datetime(2026, 1, 10)).parent == log.DEFAULT_LOG_DIR


@pytest.mark.unit
def test_http_client_loggers_are_quieted():
    """urllib3 connection chatter stays out of run logs."""
    log.get_logger("job_discovery.test")
    for name in log.QUIET_LOGGERS:
        assert logging.getLogger(name).level >= logging.WARNING
