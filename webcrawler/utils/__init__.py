"""
Utility modules for the web crawler system.
"""

from .config import Config, ConfigError, ConfigManager, CrawlerConfig, load_config, get_config
from .clock import Clock, SystemClock

__all__ = [
    'Config', 'ConfigError', 'ConfigManager', 'CrawlerConfig', 'load_config', 'get_config',
    'Clock', 'SystemClock'
]
