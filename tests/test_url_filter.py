"""Tests for URL filtering."""

import re

from webcrawler.crawler.url_filter import URLFilter


def test_pattern_must_match_whole_url():
    url_filter = URLFilter([r'http://site/a'])

    assert url_filter.is_ignored('http://site/a')
    assert not url_filter.is_ignored('http://site/about')
    assert not url_filter.is_ignored('prefix http://site/a')


def test_any_pattern_excludes():
    url_filter = URLFilter([r'.*\.pdf', re.compile(r'http://ads\..*')])

    assert url_filter.is_ignored('http://site/doc.pdf')
    assert url_filter.is_ignored('http://ads.example.com/banner')
    assert not url_filter.is_ignored('http://site/doc.html')
    assert len(url_filter) == 2


def test_empty_filter_ignores_nothing():
    assert not URLFilter().is_ignored('http://site/')
