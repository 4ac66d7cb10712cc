"""End-to-end tests for the command-line application."""

import json
import logging

import pytest
import yaml

from main import CrawlerApp


SITE_MAP = {
    'pages': {
        'http://example.com/': {
            'words': {'crawler': 3, 'home': 1},
            'links': ['http://example.com/blog', 'http://example.com/private/admin'],
        },
        'http://example.com/blog': {
            'words': {'crawler': 1, 'threads': 2},
            'links': ['http://example.com/blog/deep'],
        },
        'http://example.com/blog/deep': {'words': {'deep': 9}, 'links': []},
        'http://example.com/private/admin': {'words': {'secret': 10}, 'links': []},
    }
}


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def config_path(tmp_path):
    site_map = tmp_path / 'site_map.yaml'
    site_map.write_text(yaml.safe_dump(SITE_MAP))

    path = tmp_path / 'config.yaml'
    path.write_text(yaml.safe_dump({
        'crawler': {
            'starting_urls': ['http://example.com/'],
            'timeout_seconds': 30,
            'max_depth': 1,
            'popular_word_count': 2,
            'ignored_urls': [r'http://example\.com/private/.*'],
            'parallelism': 2,
        },
        'page_source': {'site_map': str(site_map)},
        'output': {
            'result_path': str(tmp_path / 'result.json'),
            'profile_output_path': str(tmp_path / 'profile.txt'),
        },
        'logging': {'level': 'DEBUG', 'file': str(tmp_path / 'logs' / 'crawler.log')},
    }))
    return path


def test_run_writes_result_and_profile(config_path, tmp_path):
    assert CrawlerApp().run(str(config_path)) == 0

    result = json.loads((tmp_path / 'result.json').read_text())
    assert result == {'wordCounts': {'crawler': 4, 'threads': 2}, 'urlsVisited': 2, 'urlsFailed': 0}

    profile = (tmp_path / 'profile.txt').read_text()
    assert 'ParallelWebCrawler#crawl was executed 1 times' in profile
    assert 'SiteMapPageSource#fetch_and_parse was executed 2 times' in profile
    assert (tmp_path / 'logs' / 'crawler.log').exists()


def test_starting_urls_can_be_overridden(config_path, tmp_path):
    assert CrawlerApp().run(str(config_path), starting_urls=['http://example.com/blog/deep']) == 0

    result = json.loads((tmp_path / 'result.json').read_text())
    assert result['wordCounts'] == {'deep': 9}


def test_invalid_config_exits_with_error(tmp_path):
    path = tmp_path / 'config.yaml'
    path.write_text(yaml.safe_dump({'crawler': {'max_depth': -2}}))

    assert CrawlerApp().run(str(path)) == 1


def test_wrongly_typed_config_value_exits_with_error(tmp_path):
    path = tmp_path / 'config.yaml'
    path.write_text(yaml.safe_dump({'crawler': {'max_depth': '3'}}))

    assert CrawlerApp().run(str(path)) == 1


def test_missing_site_map_exits_with_error(config_path, tmp_path):
    assert CrawlerApp().run(str(config_path), site_map=str(tmp_path / 'nope.yaml')) == 1
