#!/usr/bin/env python3
"""
Main entry point for the web crawler system.
"""

import argparse
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import List, Optional

from webcrawler.crawler import CrawlResultWriter, ParallelWebCrawler, SiteMapPageSource
from webcrawler.profiler import Profiler
from webcrawler.utils.clock import SystemClock
from webcrawler.utils.config import Config, ConfigError, load_config
from webcrawler.utils.logger import setup_logging, log_system_info
from webcrawler.utils.monitoring import CrawlMetrics


class CrawlerApp:
    """Main application class for the web crawler."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def run(self, config_path: str, site_map: Optional[str] = None,
            starting_urls: Optional[List[str]] = None, json_logs: bool = False) -> int:
        """Run the web crawler."""
        try:
            config = load_config(config_path)
        except (ConfigError, FileNotFoundError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

        setup_logging(asdict(config.logging), enable_json=json_logs)
        log_system_info()

        self.logger.info("=== WEB CRAWLER STARTING ===")
        self.logger.info(f"Configuration loaded from: {config_path}")

        try:
            self._crawl(config, site_map, starting_urls)
        except (ConfigError, FileNotFoundError, ValueError, OSError) as e:
            self.logger.error(f"Fatal error: {e}", exc_info=True)
            return 1
        finally:
            self.logger.info("=== WEB CRAWLER FINISHED ===")

        return 0

    def _crawl(self, config: Config, site_map: Optional[str],
               starting_urls: Optional[List[str]]):
        urls = starting_urls or config.crawler.starting_urls
        site_map = site_map or config.page_source.site_map
        if not site_map:
            raise ConfigError("No site map configured (page_source.site_map or --site-map)")

        self.logger.info(f"Starting URLs: {urls}")
        self.logger.info(f"Max depth: {config.crawler.max_depth}")
        self.logger.info(f"Timeout: {config.crawler.timeout_seconds}s")
        self.logger.info(f"Ignored URL patterns: {config.crawler.ignored_urls}")

        metrics = CrawlMetrics()
        if config.monitoring.metrics_enabled:
            metrics.start_server(config.monitoring.prometheus_port)

        clock = SystemClock()
        profiler = Profiler(clock)
        page_source = profiler.wrap(SiteMapPageSource.from_file(site_map))
        crawler = profiler.wrap(
            ParallelWebCrawler(config.crawler, page_source, clock=clock, metrics=metrics)
        )

        result = crawler.crawl(urls)
        self.logger.info(f"Metrics: {metrics.get_summary()}")

        writer = CrawlResultWriter(result)
        if config.output.result_path:
            writer.write(config.output.result_path)
        else:
            writer.write(sys.stdout)

        if config.output.profile_output_path:
            profiler.write_data(config.output.profile_output_path)
            self.logger.info(f"Profile data written to {config.output.profile_output_path}")
        else:
            profiler.write_data(sys.stdout)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Parallel Web Crawler",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                              # Run with default config.yaml
  python main.py --config my_config.yaml     # Run with custom config
  python main.py --site-map pages.yaml       # Override the configured site map
  python main.py --url http://example.com/   # Override the starting URLs
        """
    )

    parser.add_argument(
        '--config',
        default='config.yaml',
        help='Path to configuration file (default: config.yaml)'
    )

    parser.add_argument(
        '--site-map',
        help='YAML site map used as the page source'
    )

    parser.add_argument(
        '--url',
        action='append',
        dest='urls',
        help='Starting URL (repeatable); replaces crawler.starting_urls'
    )

    parser.add_argument(
        '--json-logs',
        action='store_true',
        help='Emit logs as JSON lines'
    )

    parser.add_argument(
        '--version',
        action='version',
        version='Parallel Web Crawler 1.0.0'
    )

    args = parser.parse_args()

    if not Path(args.config).exists():
        print(f"Error: Configuration file '{args.config}' not found.", file=sys.stderr)
        print("Please create a config.yaml file or specify a different path with --config",
              file=sys.stderr)
        return 1

    app = CrawlerApp()
    try:
        return app.run(
            config_path=args.config,
            site_map=args.site_map,
            starting_urls=args.urls,
            json_logs=args.json_logs
        )
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
