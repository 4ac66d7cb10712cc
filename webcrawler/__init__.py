"""
Parallel Web Crawler

Follows links from a set of starting URLs on a thread pool, bounded by depth
and a deadline, and reports the most popular words across visited pages.
"""

__version__ = "1.0.0"
__description__ = "A parallel, deadline-bounded web crawler that counts popular words"

from .crawler import ParallelWebCrawler, CrawlResult, crawl

__all__ = ['ParallelWebCrawler', 'CrawlResult', 'crawl']
