"""
Concurrency building blocks for the crawler.

Main Components:
- ThreadSafeSet: visited URL set with atomic claim
- ThreadSafeWordCounts: word count aggregator with atomic merge
- ThreadPoolManager: bounded worker pool
- ForestJoin / TaskNode: structural join over recursively spawned tasks
"""

from .models import CrawlTask, CrawlResult
from .thread_safe import ThreadSafeCounter, ThreadSafeSet, ThreadSafeWordCounts
from .thread_pool import ThreadPoolManager, ForestJoin, TaskNode

__all__ = [
    'CrawlTask',
    'CrawlResult',
    'ThreadSafeCounter',
    'ThreadSafeSet',
    'ThreadSafeWordCounts',
    'ThreadPoolManager',
    'ForestJoin',
    'TaskNode'
]
