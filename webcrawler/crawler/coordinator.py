"""
Crawl coordinator that runs a whole crawl on a thread pool and assembles the result.
"""

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta
from typing import Iterable, List, Optional

import psutil

from .page_source import PageSource
from .result import CrawlResult
from .task import CrawlContext, CrawlTask
from .url_filter import URLFilter
from .word_counts import sort_word_counts
from ..profiler import profiled
from ..utils.clock import Clock, SystemClock
from ..utils.config import CrawlerConfig
from ..utils.monitoring import CrawlMetrics


class _WaitGroup:
    """Counts outstanding root tasks; wait() returns once all have completed."""

    def __init__(self, count: int):
        self._count = count
        self._lock = threading.Lock()
        self._event = threading.Event()
        if count == 0:
            self._event.set()

    def done(self, _task: Optional[CrawlTask] = None):
        with self._lock:
            self._count -= 1
            finished = self._count == 0
        if finished:
            self._event.set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        return self._event.wait(timeout)


class ParallelWebCrawler:
    """
    Crawls from a set of starting URLs in parallel, following links up to
    ``max_depth`` hops and stopping new work once the timeout has elapsed.
    """

    def __init__(self, config: CrawlerConfig, page_source: PageSource,
                 clock: Optional[Clock] = None, metrics: Optional[CrawlMetrics] = None):
        config.validate()

        self.config = config
        self.page_source = page_source
        self.clock = clock or SystemClock()
        self.metrics = metrics or CrawlMetrics()
        self.url_filter = URLFilter(config.ignored_urls or ())
        self.logger = logging.getLogger(__name__)

    @staticmethod
    def get_max_parallelism() -> int:
        return psutil.cpu_count() or 1

    @property
    def parallelism(self) -> int:
        return max(1, min(self.config.parallelism, self.get_max_parallelism()))

    @profiled
    def crawl(self, starting_urls: Iterable[str]) -> CrawlResult:
        """
        Crawl from ``starting_urls`` and return the popular words and the
        number of distinct URLs visited.

        Blocks until every task spawned by this call has completed.
        """
        urls: List[str] = list(starting_urls)
        deadline = self.clock.now() + timedelta(seconds=self.config.timeout_seconds)
        start_time = time.time()

        self.logger.info(
            f"Starting crawl of {len(urls)} URLs "
            f"(max_depth={self.config.max_depth}, parallelism={self.parallelism}, "
            f"timeout={self.config.timeout_seconds}s)"
        )

        wait_group = _WaitGroup(len(urls))
        with ThreadPoolExecutor(max_workers=self.parallelism,
                                thread_name_prefix='crawler') as executor:
            context = CrawlContext(
                executor=executor,
                clock=self.clock,
                deadline=deadline,
                page_source=self.page_source,
                url_filter=self.url_filter,
                metrics=self.metrics
            )
            for url in urls:
                CrawlTask(context, url, self.config.max_depth, on_complete=wait_group.done).start()

            wait_group.wait()

        urls_visited = len(context.visited)
        if context.counts.is_empty():
            word_counts = {}
        else:
            word_counts = sort_word_counts(context.counts.snapshot(), self.config.popular_word_count)

        self.logger.info("=== CRAWL COMPLETED ===")
        self.logger.info(f"URLs visited: {urls_visited}")
        self.logger.info(f"Fetch failures: {context.failures}")
        self.logger.info(f"Total time: {time.time() - start_time:.2f} seconds")

        return CrawlResult(
            word_counts=word_counts,
            urls_visited=urls_visited,
            urls_failed=context.failures
        )


def crawl(starting_urls: Iterable[str], config: CrawlerConfig, page_source: PageSource,
          clock: Optional[Clock] = None) -> CrawlResult:
    """Run a single crawl with a fresh ParallelWebCrawler."""
    return ParallelWebCrawler(config, page_source, clock=clock).crawl(starting_urls)
