"""
URL exclusion rules.
"""

from typing import Iterable, Pattern, Union

from webcrawler.utils.patterns import compile_patterns


class ExclusionMatcher:
    """Decides whether a URL is excluded from crawling. Stateless and reentrant."""
    
    def __init__(self, patterns: Iterable[Union[str, Pattern]] = ()):
        self._patterns = tuple(compile_patterns(patterns))
    
    def is_excluded(self, url: str) -> bool:
        """True if any pattern matches the whole URL."""
        for pattern in self._patterns:
            if pattern.fullmatch(url):
                return True
        return False
