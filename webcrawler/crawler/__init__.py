"""
Traversal engine: exclusion rules, word ranking and the parallel crawler.
"""

from .exclusion import ExclusionMatcher
from .word_counts import sort_word_counts
from .parallel_crawler import ParallelWebCrawler

__all__ = ['ExclusionMatcher', 'sort_word_counts', 'ParallelWebCrawler']
