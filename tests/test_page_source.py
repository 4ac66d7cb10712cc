"""Tests for the site map page source."""

import pytest

from webcrawler.crawler.page_source import PageSourceError, SiteMapPageSource


SITE_MAP = """
pages:
  http://example.com/:
    words: {hello: 2, world: 1}
    links: [http://example.com/about]
  http://example.com/about:
    links: []
  http://example.com/broken:
    error: connection reset
"""


@pytest.fixture
def source(tmp_path):
    path = tmp_path / 'site_map.yaml'
    path.write_text(SITE_MAP)
    return SiteMapPageSource.from_file(path)


def test_fetch_known_page(source):
    result = source.fetch_and_parse('http://example.com/')

    assert result.word_counts == {'hello': 2, 'world': 1}
    assert result.links == ['http://example.com/about']
    assert len(source) == 3


def test_page_without_words(source):
    result = source.fetch_and_parse('http://example.com/about')

    assert result.word_counts == {}
    assert result.links == []


def test_results_are_independent_copies(source):
    first = source.fetch_and_parse('http://example.com/')
    first.word_counts['hello'] = 100

    assert source.fetch_and_parse('http://example.com/').word_counts['hello'] == 2


def test_unknown_page_raises(source):
    with pytest.raises(PageSourceError) as exc_info:
        source.fetch_and_parse('http://example.com/nope')

    assert exc_info.value.url == 'http://example.com/nope'


def test_error_page_raises(source):
    with pytest.raises(PageSourceError, match='connection reset'):
        source.fetch_and_parse('http://example.com/broken')


def test_invalid_counts_are_rejected():
    with pytest.raises(ValueError):
        SiteMapPageSource({'http://x/': {'words': {'a': -1}}})


def test_missing_site_map(tmp_path):
    with pytest.raises(FileNotFoundError):
        SiteMapPageSource.from_file(tmp_path / 'missing.yaml')
