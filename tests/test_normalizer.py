"""Unit tests for job normalization and fingerprints."""

from datetime import datetime, timezone

import pytest

from job_discovery.fingerprint import KEY_PREFIX, fingerprint, fingerprint_key
from job_discovery.models import Job, JobSource, Salary
from job_discovery.normalizer import normalize


def _job(**overrides):
    fields = dict(
        title="  Software Engineer  ",
        company=" Apple Inc. ",
        description=" Build apps \n",
        location=" CA ",
        posted_at=datetime(2026, 1, 7, tzinfo=timezone.utc),
        url="https://apple.com",
        source=JobSource.LINKEDIN,
    )
    fields.update(overrides)
    return Job(**fields)


@pytest.mark.unit
def test_normalize_trims_text_fields():
    """Whitespace and newlines are trimmed from title, company, description, location."""
    normalized = normalize(_job())

    assert normalized.title == "Software Engineer"
    assert normalized.company == "Apple Inc."
    assert normalized.description == "Build apps"
    assert normalized.location == "CA"


@pytest.mark.unit
def test_normalize_passes_other_fields_through():
    """Identity, url, date, salary and source are untouched."""
    job = _job(salary=Salary(min=100, max=200))
    normalized = normalize(job)

    assert normalized.id == job.id
    assert normalized.url == job.url
    assert normalized.posted_at == job.posted_at
    assert normalized.salary == job.salary
    assert normalized.source == job.source


@pytest.mark.unit
def test_normalize_keeps_missing_location():
    assert normalize(_job(location=None)).location is None


@pytest.mark.unit
def test_normalize_returns_new_value():
    """The input job is never mutated."""
    job = _job()
    normalize(job)
    assert job.title == "  Software Engineer  "


@pytest.mark.unit
@pytest.mark.parametrize(
    "title,company",
    [
        ("  Software Engineer  ", " Apple Inc. "),
        ("\n\tData Engineer\n", "Acme"),
        ("", ""),
        ("Already clean", "Clean Co"),
    ],
)
def test_normalize_is_idempotent(title, company):
    once = normalize(_job(title=title, company=company))
    assert normalize(once) == once


@pytest.mark.unit
def test_fingerprint_ignores_url_date_and_source():
    """Same (title, company) gives the same key regardless of other fields."""
    a = _job(url="https://a.example/1", source=JobSource.INDEED)
    b = _job(
        url="https://b.example/2",
        posted_at=datetime(2025, 5, 1, tzinfo=timezone.utc),
        source=JobSource.CUSTOM,
    )
    assert fingerprint_key(a) == fingerprint_key(b)
    assert fingerprint_key(a).startswith(KEY_PREFIX)


@pytest.mark.unit
def test_fingerprint_is_case_and_whitespace_insensitive():
    assert fingerprint("Software  Engineer", "Apple") == fingerprint(" software engineer ", "APPLE")


@pytest.mark.unit
def test_fingerprint_differs_for_different_company():
    assert fingerprint("Software Engineer", "Apple") != fingerprint("Software Engineer", "Google")


@pytest.mark.unit
def test_fingerprint_does_not_merge_across_separator():
    assert fingerprint("a b", "c") != fingerprint("a", "b c")
