"""Tests for the shared visited set and word count accumulator."""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from webcrawler.crawler.state import VisitedSet, WordCountAccumulator


def test_claim_succeeds_once():
    visited = VisitedSet()

    assert visited.claim('http://a/')
    assert not visited.claim('http://a/')
    assert 'http://a/' in visited
    assert 'http://b/' not in visited
    assert len(visited) == 1


def test_concurrent_claims_have_a_single_winner():
    visited = VisitedSet(stripes=4)
    barrier = threading.Barrier(16)

    def contend(_):
        barrier.wait()
        return [visited.claim(f'http://site/{i}') for i in range(200)]

    with ThreadPoolExecutor(max_workers=16) as executor:
        outcomes = list(executor.map(contend, range(16)))

    for i in range(200):
        assert sum(outcome[i] for outcome in outcomes) == 1
    assert visited.snapshot() == {f'http://site/{i}' for i in range(200)}


def test_accumulator_merges_additively():
    counts = WordCountAccumulator()
    assert counts.is_empty()

    counts.merge({'a': 2, 'b': 1})
    counts.merge({'a': 3})
    counts.add('c', 0)

    assert counts.snapshot() == {'a': 5, 'b': 1, 'c': 0}
    assert not counts.is_empty()


def test_concurrent_merges_lose_no_updates():
    counts = WordCountAccumulator(stripes=2)
    page = {'crawler': 1, 'thread': 2, 'lock': 3}

    def merge_many(_):
        for _ in range(500):
            counts.merge(page)

    with ThreadPoolExecutor(max_workers=8) as executor:
        list(executor.map(merge_many, range(8)))

    assert counts.snapshot() == {'crawler': 4000, 'thread': 8000, 'lock': 12000}


def test_stripes_must_be_positive():
    with pytest.raises(ValueError):
        VisitedSet(stripes=0)
