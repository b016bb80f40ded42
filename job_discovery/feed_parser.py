"""Turn RSS 2.0 / Atom feed bytes into ``Job`` candidates.

Items are emitted as soon as their closing tag is read. Malformed XML raises
``FeedParseError`` at the point of failure, so a consumer of ``iter_jobs``
keeps every job it already received from that document.
"""
from __future__ import annotations

import io
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Callable, Iterator
from xml.etree import ElementTree

from job_discovery.company import extract_company
from job_discovery.exceptions import FeedParseError
from job_discovery.log import get_logger
from job_discovery.models import Job, JobSource

log = get_logger(__name__)

ITEM_TAGS = frozenset({"item", "entry"})
DESCRIPTION_TAGS = frozenset({"description", "summary"})
DATE_TAGS = frozenset({"pubDate", "published", "updated"})
FALLBACK_URL = "https://example.com"

# plain RSS 2.0, Atom and RSS 1.0 (RDF); media:, dc:, content: etc. are ignored
FEED_NAMESPACES = frozenset({
    "",
    "http://www.w3.org/2005/Atom",
    "http://purl.org/rss/1.0/",
})


def _split_tag(tag: str) -> tuple[str, str]:
    # "{http://www.w3.org/2005/Atom}entry" -> ("http://www.w3.org/2005/Atom", "entry")
    if tag.startswith("{"):
        ns, _, local = tag[1:].partition("}")
        return ns, local
    return "", tag


def _text(elem: ElementTree.Element) -> str:
    return "".join(elem.itertext()).strip()


def parse_date(value: str, now: Callable[[], datetime] | None = None) -> datetime:
    """Parse an RSS (RFC 822) or Atom (ISO-8601) date; fall back to now (UTC)."""
    value = (value or "").strip()
    if value:
        try:
            parsed = parsedate_to_datetime(value)
        except (TypeError, ValueError, IndexError):
            parsed = None
        if parsed is None:
            try:
                parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
            except ValueError:
                parsed = None
        if parsed is not None:
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
            return parsed.astimezone(timezone.utc)
        log.debug("Unparseable feed date %r, using processing time", value)
    return (now or (lambda: datetime.now(timezone.utc)))()


class _ItemState:
    __slots__ = ("title", "description", "link", "date")

    def __init__(self) -> None:
        self.title = ""
        self.description = ""
        self.link = ""
        self.date = ""


class FeedParser:
    """Parser for RSS ``<item>`` and Atom ``<entry>`` elements."""

    def __init__(self, now: Callable[[], datetime] | None = None) -> None:
        self._now = now

    def iter_jobs(self, data: bytes, source: JobSource) -> Iterator[Job]:
        """Yield one job per item/entry.

        Only direct children of an item are read, so nested elements such as
        ``<media:content><media:title>`` or an Atom ``<source>`` block never
        leak into the job's title or date.
        """
        if not data or not data.strip():
            return

        item: _ItemState | None = None
        item_depth = 0
        depth = 0
        events = ElementTree.iterparse(io.BytesIO(data), events=("start", "end"))
        try:
            for event, elem in events:
                ns, tag = _split_tag(elem.tag)
                ours = ns in FEED_NAMESPACES
                if event == "start":
                    depth += 1
                    if item is None and ours and tag in ITEM_TAGS:
                        item = _ItemState()
                        item_depth = depth
                    continue

                if item is not None and depth == item_depth:
                    job = self._build(item, source)
                    item = None
                    elem.clear()
                    depth -= 1
                    if job is not None:
                        yield job
                    continue
                if item is not None and ours and depth == item_depth + 1:
                    self._collect(item, tag, elem)
                depth -= 1
        except ElementTree.ParseError as exc:
            raise FeedParseError(str(exc)) from exc

    def parse_jobs(self, data: bytes, source: JobSource) -> list[Job]:
        return list(self.iter_jobs(data, source))

    @staticmethod
    def _collect(item: _ItemState, tag: str, elem: ElementTree.Element) -> None:
        if tag == "title":
            item.title += _text(elem)
        elif tag in DESCRIPTION_TAGS:
            item.description += _text(elem)
        elif tag == "link":
            if not item.link:
                # Atom carries the URL in href, RSS in the element text
                item.link = _text(elem) or (elem.get("href") or "").strip()
        elif tag in DATE_TAGS:
            if not item.date:
                item.date = _text(elem)

    def _build(self, item: _ItemState, source: JobSource) -> Job | None:
        if not item.title:
            return None
        return Job(
            title=item.title,
            company=extract_company(item.title, item.description),
            description=item.description,
            posted_at=parse_date(item.date, self._now),
            url=item.link or FALLBACK_URL,
            source=source,
        )
