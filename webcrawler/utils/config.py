"""
Configuration management for the web crawler system.
"""

import re
import yaml
import logging
from pathlib import Path
from typing import Dict, List, Any, Optional
from dataclasses import dataclass, field


# Keeps the crawl deadline inside the range a datetime can represent
MAX_TIMEOUT_SECONDS = 10 ** 9


class ConfigError(ValueError):
    """Raised when a configuration value is invalid."""


@dataclass
class CrawlerConfig:
    """Configuration for crawler behavior."""
    starting_urls: List[str] = field(default_factory=list)
    timeout_seconds: float = 10.0
    max_depth: int = 3
    popular_word_count: int = 5
    ignored_urls: List[str] = field(default_factory=list)
    parallelism: int = 4

    def validate(self):
        """Check value types and ranges; raises ConfigError on the first violation."""
        for name in ('max_depth', 'popular_word_count', 'parallelism'):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise ConfigError(f"{name} must be an integer, got {value!r}")

        if not isinstance(self.timeout_seconds, (int, float)) or isinstance(self.timeout_seconds, bool):
            raise ConfigError(f"timeout_seconds must be a number, got {self.timeout_seconds!r}")

        if not 0 <= self.timeout_seconds <= MAX_TIMEOUT_SECONDS:
            raise ConfigError(
                f"timeout_seconds must be between 0 and {MAX_TIMEOUT_SECONDS}, got {self.timeout_seconds!r}"
            )

        if self.max_depth < 0:
            raise ConfigError("max_depth must be non-negative")

        if self.popular_word_count < 0:
            raise ConfigError("popular_word_count must be non-negative")

        if self.parallelism < 1:
            raise ConfigError("parallelism must be at least 1")

        for name in ('starting_urls', 'ignored_urls'):
            if not isinstance(getattr(self, name) or [], (list, tuple)):
                raise ConfigError(f"{name} must be a list")

        for pattern in self.ignored_urls or []:
            try:
                re.compile(pattern)
            except (re.error, TypeError) as e:
                raise ConfigError(f"Invalid ignored_urls pattern {pattern!r}: {e}") from e


@dataclass
class PageSourceConfig:
    """Configuration for the page source."""
    site_map: Optional[str] = None


@dataclass
class OutputConfig:
    """Where crawl results and profiling data are written."""
    result_path: str = ""
    profile_output_path: str = ""


@dataclass
class LoggingConfig:
    """Configuration for logging."""
    level: str = "INFO"
    file: str = "logs/crawler.log"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class MonitoringConfig:
    """Configuration for monitoring."""
    prometheus_port: int = 8000
    metrics_enabled: bool = False


@dataclass
class Config:
    """Main configuration class."""
    crawler: CrawlerConfig
    page_source: PageSourceConfig
    output: OutputConfig
    logging: LoggingConfig
    monitoring: MonitoringConfig


class ConfigManager:
    """Manages configuration loading and validation."""

    def __init__(self, config_path: str = "config.yaml"):
        self.config_path = Path(config_path)
        self._config: Optional[Config] = None

    def load_config(self) -> Config:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        with open(self.config_path, 'r') as file:
            config_data = yaml.safe_load(file) or {}

        self._config = self.parse(config_data)
        self._validate_config()
        return self._config

    @staticmethod
    def parse(config_data: Dict[str, Any]) -> Config:
        """Build a Config from already-loaded YAML data."""
        try:
            return Config(
                crawler=CrawlerConfig(**(config_data.get('crawler') or {})),
                page_source=PageSourceConfig(**(config_data.get('page_source') or {})),
                output=OutputConfig(**(config_data.get('output') or {})),
                logging=LoggingConfig(**(config_data.get('logging') or {})),
                monitoring=MonitoringConfig(**(config_data.get('monitoring') or {})),
            )
        except TypeError as e:
            # Unknown keys in a section
            raise ConfigError(f"Invalid configuration: {e}") from e

    def _validate_config(self):
        """Validate configuration values."""
        if not self._config:
            raise ConfigError("Configuration not loaded")

        self._config.crawler.validate()

        if not isinstance(logging.getLevelName(self._config.logging.level.upper()), int):
            raise ConfigError(f"Unknown logging level: {self._config.logging.level}")

        logging.info("Configuration validation passed")

    @property
    def config(self) -> Config:
        """Get the loaded configuration."""
        if not self._config:
            raise ConfigError("Configuration not loaded. Call load_config() first.")
        return self._config


# Global config manager instance
config_manager = ConfigManager()


def get_config() -> Config:
    """Get the global configuration instance."""
    return config_manager.config


def load_config(config_path: str = "config.yaml") -> Config:
    """Load configuration from file."""
    global config_manager
    config_manager = ConfigManager(config_path)
    return config_manager.load_config()
