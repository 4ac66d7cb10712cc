"""
Monitoring and metrics collection for the web crawler system.
"""

import logging
from typing import Dict, Optional

from prometheus_client import Counter, Histogram, CollectorRegistry, generate_latest
from prometheus_client import start_http_server


SKIP_REASONS = ('depth', 'deadline', 'filtered', 'already_visited')


class CrawlMetrics:
    """
    Prometheus metrics for a crawler.

    Each instance owns its registry so several crawlers (and tests) can
    coexist in one process.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.logger = logging.getLogger(__name__)
        self.registry = registry or CollectorRegistry()

        self.pages_visited = Counter(
            'crawler_pages_visited_total',
            'Total number of pages fetched and counted',
            registry=self.registry
        )
        self.urls_skipped = Counter(
            'crawler_urls_skipped_total',
            'URLs not fetched, by reason',
            ['reason'],
            registry=self.registry
        )
        self.fetch_failures = Counter(
            'crawler_fetch_failures_total',
            'Page source failures',
            registry=self.registry
        )
        self.fetch_time = Histogram(
            'crawler_fetch_time_seconds',
            'Time spent in the page source per URL',
            registry=self.registry
        )

    def record_visit(self, fetch_seconds: float):
        self.pages_visited.inc()
        self.fetch_time.observe(fetch_seconds)

    def record_skip(self, reason: str):
        if reason not in SKIP_REASONS:
            raise ValueError(f"Unknown skip reason: {reason}")
        self.urls_skipped.labels(reason=reason).inc()

    def record_failure(self):
        self.fetch_failures.inc()

    def get_summary(self) -> Dict[str, float]:
        """Get current values of all counters."""
        summary = {
            'pages_visited': self.registry.get_sample_value('crawler_pages_visited_total') or 0.0,
            'fetch_failures': self.registry.get_sample_value('crawler_fetch_failures_total') or 0.0,
        }
        for reason in SKIP_REASONS:
            value = self.registry.get_sample_value(
                'crawler_urls_skipped_total', {'reason': reason}
            )
            summary[f'skipped_{reason}'] = value or 0.0
        return summary

    def export_text(self) -> bytes:
        """Render the registry in the Prometheus exposition format."""
        return generate_latest(self.registry)

    def start_server(self, port: int):
        """Start Prometheus metrics HTTP server."""
        start_http_server(port, registry=self.registry)
        self.logger.info(f"Prometheus metrics server started on port {port}")
