"""
URL filter that excludes URLs matching configured patterns from a crawl.
"""

import re
from typing import Iterable, List, Pattern, Union


class URLFilter:
    """
    A set of regular expressions; a URL that fully matches any of them is
    never fetched and never counted as visited.
    """

    def __init__(self, patterns: Iterable[Union[str, Pattern]] = ()):
        self.patterns: List[Pattern] = [
            p if isinstance(p, re.Pattern) else re.compile(p) for p in patterns
        ]

    def is_ignored(self, url: str) -> bool:
        return any(pattern.fullmatch(url) for pattern in self.patterns)

    def __len__(self) -> int:
        return len(self.patterns)
