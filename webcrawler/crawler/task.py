"""
Crawl tasks: the recursive unit of work of a crawl.

A task visits one URL and forks one child task per outbound link. Tasks run
on a shared thread pool; instead of blocking a worker thread while its
children run, each task keeps a pending count (itself plus every forked
child) and reports completion to its parent only when that count drops to
zero. A parent therefore completes strictly after all of its children.
"""

import logging
import threading
import time
from concurrent.futures import Executor, Future
from datetime import datetime
from typing import Callable, Optional

from .page_source import PageSource
from .state import VisitedSet, WordCountAccumulator
from .url_filter import URLFilter
from ..utils.clock import Clock
from ..utils.logger import get_crawler_logger
from ..utils.monitoring import CrawlMetrics


class CrawlContext:
    """State shared by every task of one crawl run."""

    def __init__(self, executor: Executor, clock: Clock, deadline: datetime,
                 page_source: PageSource, url_filter: URLFilter, metrics: CrawlMetrics):
        self.executor = executor
        self.clock = clock
        self.deadline = deadline
        self.page_source = page_source
        self.url_filter = url_filter
        self.metrics = metrics

        self.visited = VisitedSet()
        self.counts = WordCountAccumulator()

        self._failures = 0
        self._failures_lock = threading.Lock()

    def deadline_passed(self) -> bool:
        return self.clock.now() >= self.deadline

    def record_failure(self):
        with self._failures_lock:
            self._failures += 1
        self.metrics.record_failure()

    @property
    def failures(self) -> int:
        with self._failures_lock:
            return self._failures


class CrawlTask:
    """Visits one URL with a remaining depth budget."""

    def __init__(self, context: CrawlContext, url: str, remaining_depth: int,
                 parent: Optional['CrawlTask'] = None,
                 on_complete: Optional[Callable[['CrawlTask'], None]] = None):
        if remaining_depth < 0:
            raise ValueError("remaining_depth must be non-negative")

        self.context = context
        self.url = url
        self.remaining_depth = remaining_depth
        self.parent = parent
        self.on_complete = on_complete
        self.logger = get_crawler_logger(__name__, depth=remaining_depth)

        self._pending = 1
        self._lock = threading.Lock()

    def start(self):
        """Schedule this task on the context's executor."""
        future = self.context.executor.submit(self.run)
        future.add_done_callback(self._check_future)

    def _check_future(self, future: Future):
        error = future.exception()
        if error is not None:
            self.logger.error(f"Task for {self.url} failed: {error!r}", exc_info=error)

    def run(self):
        try:
            self.visit()
        except Exception:
            # Unexpected errors stay local to this branch
            self.logger.exception(f"Unexpected error while crawling {self.url}")
        finally:
            self._release()

    def visit(self):
        """Fetch the URL, merge its words and fork tasks for its links."""
        context = self.context

        if context.deadline_passed():
            self.logger.log_url_event(logging.DEBUG, self.url, "Deadline reached, skipping")
            context.metrics.record_skip('deadline')
            return

        if context.url_filter.is_ignored(self.url):
            self.logger.log_url_event(logging.DEBUG, self.url, "Ignored by URL filter")
            context.metrics.record_skip('filtered')
            return

        if not context.visited.claim(self.url):
            context.metrics.record_skip('already_visited')
            return

        start_time = time.perf_counter()
        try:
            result = context.page_source.fetch_and_parse(self.url)
        except Exception as e:
            self.logger.log_url_event(logging.WARNING, self.url, f"Failed to fetch {self.url}: {e}")
            context.record_failure()
            return
        context.metrics.record_visit(time.perf_counter() - start_time)

        context.counts.merge(result.word_counts)
        self.logger.log_url_event(
            logging.DEBUG, self.url,
            f"Visited {self.url}: {len(result.word_counts)} words, {len(result.links)} links"
        )

        if self.remaining_depth == 0:
            for _ in result.links:
                context.metrics.record_skip('depth')
            return

        for link in result.links:
            self.fork(CrawlTask(context, link, self.remaining_depth - 1, parent=self))

    def fork(self, child: 'CrawlTask'):
        with self._lock:
            self._pending += 1
        try:
            child.start()
        except RuntimeError as e:
            # Executor already shut down; the child never runs
            self.logger.error(f"Could not schedule {child.url}: {e}")
            child._release()

    def _release(self):
        """Drop one pending unit; finished tasks propagate up the parent chain."""
        task = self
        while task is not None:
            with task._lock:
                task._pending -= 1
                done = task._pending == 0
            if not done:
                return
            if task.on_complete is not None:
                task.on_complete(task)
            task = task.parent

    @property
    def done(self) -> bool:
        with self._lock:
            return self._pending == 0
