"""
Crawl result and its JSON writer.
"""

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, TextIO, Union
from dataclasses import dataclass, field


@dataclass(frozen=True)
class CrawlResult:
    """Outcome of one crawl run."""
    word_counts: Mapping[str, int] = field(default_factory=dict)
    urls_visited: int = 0
    urls_failed: int = 0

    def __post_init__(self):
        # Read-only view over a private copy, keeping popularity order
        object.__setattr__(self, 'word_counts', MappingProxyType(dict(self.word_counts)))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            'wordCounts': dict(self.word_counts),
            'urlsVisited': self.urls_visited,
            'urlsFailed': self.urls_failed
        }


class CrawlResultWriter:
    """Writes a CrawlResult as JSON to a file or stream."""

    def __init__(self, result: CrawlResult):
        self.result = result
        self.logger = logging.getLogger(__name__)

    def write(self, destination: Union[str, Path, TextIO]):
        """
        Write the result as JSON.

        Paths are opened in append mode, so repeated runs accumulate in
        the same file.
        """
        if isinstance(destination, (str, Path)):
            path = Path(destination)
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, 'a', encoding='utf-8') as file:
                self._write_to(file)
            self.logger.info(f"Crawl result written to {path}")
        else:
            self._write_to(destination)

    def _write_to(self, stream: TextIO):
        json.dump(self.result.to_dict(), stream, ensure_ascii=False, indent=2)
        stream.write('\n')
