"""
Page sources: the collaborator that turns a URL into word counts and links.
"""

import logging
from pathlib import Path
from typing import Dict, List, Any, Mapping, Union
from dataclasses import dataclass, field

import yaml

from ..profiler import profiled


class PageSourceError(Exception):
    """Raised when a page cannot be fetched or parsed."""

    def __init__(self, url: str, message: str):
        super().__init__(f"{url}: {message}")
        self.url = url


@dataclass
class PageParseResult:
    """Container for the parsed content of one page."""
    word_counts: Dict[str, int] = field(default_factory=dict)
    links: List[str] = field(default_factory=list)


class PageSource:
    """
    Produces a PageParseResult for a URL.

    Implementations may be slow and may raise; they must be safe to call
    from several threads at once.
    """

    def fetch_and_parse(self, url: str) -> PageParseResult:
        raise NotImplementedError


class SiteMapPageSource(PageSource):
    """
    Offline page source backed by a site map.

    The site map describes each page by its word counts and outbound links:

        pages:
          http://example.com/:
            words: {hello: 2, world: 1}
            links: [http://example.com/about]

    Unknown URLs raise PageSourceError. A page may also be marked with
    ``error: <message>`` to simulate a fetch failure.
    """

    def __init__(self, pages: Mapping[str, Mapping[str, Any]]):
        self.logger = logging.getLogger(__name__)
        self._pages: Dict[str, Union[PageParseResult, str]] = {}

        for url, page in pages.items():
            page = page or {}
            if page.get('error'):
                self._pages[url] = str(page['error'])
                continue
            words = page.get('words') or {}
            for word, count in words.items():
                if not isinstance(count, int) or isinstance(count, bool) or count < 0:
                    raise ValueError(f"Invalid count {count!r} for word {word!r} on {url}")
            self._pages[url] = PageParseResult(
                word_counts={str(word): count for word, count in words.items()},
                links=[str(link) for link in page.get('links') or []]
            )

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> 'SiteMapPageSource':
        """Load a site map from a YAML file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Site map not found: {path}")

        with open(path, 'r', encoding='utf-8') as file:
            data = yaml.safe_load(file) or {}

        pages = data.get('pages') or {}
        source = cls(pages)
        source.logger.info(f"Loaded site map with {len(pages)} pages from {path}")
        return source

    @profiled
    def fetch_and_parse(self, url: str) -> PageParseResult:
        page = self._pages.get(url)
        if page is None:
            raise PageSourceError(url, "page not found")
        if isinstance(page, str):
            raise PageSourceError(url, page)
        # Callers get their own copies
        return PageParseResult(word_counts=dict(page.word_counts), links=list(page.links))

    def __len__(self) -> int:
        return len(self._pages)
