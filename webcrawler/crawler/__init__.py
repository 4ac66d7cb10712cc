"""
Web crawler core components.
"""

from .coordinator import ParallelWebCrawler, crawl
from .page_source import PageSource, PageSourceError, PageParseResult, SiteMapPageSource
from .result import CrawlResult, CrawlResultWriter
from .state import VisitedSet, WordCountAccumulator
from .task import CrawlContext, CrawlTask
from .url_filter import URLFilter
from .word_counts import select_popular, sort_word_counts

__all__ = [
    'ParallelWebCrawler', 'crawl',
    'PageSource', 'PageSourceError', 'PageParseResult', 'SiteMapPageSource',
    'CrawlResult', 'CrawlResultWriter',
    'VisitedSet', 'WordCountAccumulator',
    'CrawlContext', 'CrawlTask',
    'URLFilter',
    'select_popular', 'sort_word_counts'
]
