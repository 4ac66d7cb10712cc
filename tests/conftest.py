"""Shared fixtures for crawler tests."""

import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional

import pytest

from webcrawler.crawler.page_source import PageParseResult, PageSource, PageSourceError
from webcrawler.utils.clock import Clock
from webcrawler.utils.config import CrawlerConfig


class FakeClock(Clock):
    """Clock that only moves when told to."""

    def __init__(self, start: Optional[datetime] = None):
        self._now = start or datetime(2024, 1, 1, tzinfo=timezone.utc)
        self._lock = threading.Lock()

    def now(self) -> datetime:
        with self._lock:
            return self._now

    def advance(self, delta: timedelta):
        with self._lock:
            self._now += delta


class RecordingPageSource(PageSource):
    """In-memory page source that logs every fetch."""

    def __init__(self, pages: Dict[str, dict], failing: tuple = (),
                 on_fetch: Optional[Callable[[str], None]] = None):
        self.pages = pages
        self.failing = set(failing)
        self.on_fetch = on_fetch
        self.calls: List[str] = []
        self._lock = threading.Lock()

    def fetch_and_parse(self, url: str) -> PageParseResult:
        with self._lock:
            self.calls.append(url)
        if self.on_fetch:
            self.on_fetch(url)
        if url in self.failing or url not in self.pages:
            raise PageSourceError(url, "unavailable")
        page = self.pages[url]
        return PageParseResult(word_counts=dict(page.get('words', {})),
                               links=list(page.get('links', [])))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_config():
    def _make(**overrides):
        values = dict(
            timeout_seconds=60,
            max_depth=5,
            popular_word_count=10,
            ignored_urls=[],
            parallelism=4,
        )
        values.update(overrides)
        return CrawlerConfig(**values)
    return _make
