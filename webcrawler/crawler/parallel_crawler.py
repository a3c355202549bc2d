"""
Parallel web crawler.

A traversal starts one root task per seed URL on a bounded worker pool. Each task
checks depth and deadline, skips excluded or already claimed URLs, parses its
page, merges the page's word counts into the shared aggregator and schedules one
child task per outbound link. crawl() returns once every task tree has settled.
"""

import os
import time
from typing import Callable, List, Optional, Pattern, Sequence, Union

from webcrawler.concurrent.models import CrawlTask, CrawlResult
from webcrawler.concurrent.thread_pool import ThreadPoolManager, ForestJoin, TaskNode
from webcrawler.concurrent.thread_safe import ThreadSafeSet, ThreadSafeWordCounts
from webcrawler.parser.page_parser import PageParser
from webcrawler.profiler import profiled
from webcrawler.utils.errors import CrawlerError, ValidationError
from webcrawler.utils.logging import get_logger
from .exclusion import ExclusionMatcher
from .word_counts import sort_word_counts


logger = get_logger(__name__)


class _Traversal:
    """State owned by a single crawl() call."""

    def __init__(
        self,
        pool: ThreadPoolManager,
        page_parser: PageParser,
        exclusions: ExclusionMatcher,
        clock: Callable[[], float]
    ):
        self.pool = pool
        self.page_parser = page_parser
        self.exclusions = exclusions
        self.clock = clock
        self.join = ForestJoin()
        self.visited = ThreadSafeSet()
        self.counts = ThreadSafeWordCounts()

    def start(self, start_urls: Sequence[str], max_depth: int, deadline: float) -> None:
        """Submit one root task per seed URL."""
        try:
            for url in start_urls:
                self.submit(CrawlTask(url=url, remaining_depth=max_depth, deadline=deadline),
                            self.join.add_root())
        finally:
            self.join.seal()

    def submit(self, task: CrawlTask, node: TaskNode) -> None:
        try:
            self.pool.submit(self.run, task, node)
        except Exception as e:
            # The task will never run, so its slot is released here
            self.join.record_failure(e)
            node.settle()

    def run(self, task: CrawlTask, node: TaskNode) -> None:
        """Worker entry point for one task."""
        try:
            if self.join.has_failed():
                return
            for link in self.visit(task):
                self.submit(task.child(link), node.spawn_child())
        except Exception as e:
            self.join.record_failure(e)
        finally:
            node.settle()

    def visit(self, task: CrawlTask) -> List[str]:
        """
        Process one task's page.

        Returns:
            Outbound links to crawl next, empty when the task stops here
        """
        if task.is_exhausted() or task.is_expired(self.clock()):
            return []

        if self.exclusions.is_excluded(task.url):
            logger.debug(f"Skipping excluded URL {task.url}")
            return []

        if not self.visited.try_claim(task.url):
            return []

        try:
            page = self.page_parser.parse(task.url)
        except Exception as e:
            logger.warning(f"Failed to fetch {task.url}: {e}")
            return []

        self.counts.merge_all(page.word_counts)
        logger.debug(f"Visited {task.url} (depth left {task.remaining_depth}, "
                     f"{len(page.links)} links, {len(page.word_counts)} words)")
        return list(page.links)


class ParallelWebCrawler:
    """Crawls a link graph on a bounded thread pool and counts words."""

    def __init__(
        self,
        page_parser: PageParser,
        timeout_seconds: float,
        popular_word_count: int,
        parallelism: int,
        max_depth: int,
        ignored_urls: Sequence[Union[str, Pattern]] = (),
        clock: Callable[[], float] = time.monotonic
    ):
        """
        Initialize crawler.

        Args:
            page_parser: Fetches a page and returns its links and word counts
            timeout_seconds: Time after crawl() starts when no new page fetch may begin
            popular_word_count: Number of words kept in the result
            parallelism: Requested number of worker threads
            max_depth: Remaining depth given to seed URLs
            ignored_urls: Regular expressions for URLs never to crawl
            clock: Monotonic clock in seconds
        """
        if timeout_seconds <= 0:
            raise ValidationError("timeout_seconds must be positive", {"timeout_seconds": timeout_seconds})
        if popular_word_count < 0:
            raise ValidationError("popular_word_count must be non-negative",
                                  {"popular_word_count": popular_word_count})
        if parallelism < 1:
            raise ValidationError("parallelism must be at least 1", {"parallelism": parallelism})
        if max_depth < 0:
            raise ValidationError("max_depth must be non-negative", {"max_depth": max_depth})

        self.page_parser = page_parser
        self.timeout_seconds = timeout_seconds
        self.popular_word_count = popular_word_count
        self.max_depth = max_depth
        self.exclusions = ExclusionMatcher(ignored_urls)
        self.worker_count = max(1, min(parallelism, self.get_max_parallelism()))
        self._clock = clock

    @classmethod
    def from_config(cls, config, page_parser: PageParser,
                    clock: Callable[[], float] = time.monotonic) -> "ParallelWebCrawler":
        """
        Build a crawler from a CrawlerConfiguration.

        Args:
            config: Loaded crawler configuration
            page_parser: Page parser to use
            clock: Monotonic clock in seconds
        """
        return cls(
            page_parser=page_parser,
            timeout_seconds=config.timeout_seconds,
            popular_word_count=config.popular_word_count,
            parallelism=config.parallelism,
            max_depth=config.max_depth,
            ignored_urls=config.ignored_urls,
            clock=clock
        )

    @staticmethod
    def get_max_parallelism() -> int:
        """Number of CPUs available to this process."""
        return os.cpu_count() or 1

    @profiled
    def crawl(self, start_urls: Sequence[str]) -> CrawlResult:
        """
        Crawl from the given seed URLs.

        Args:
            start_urls: Seed URLs, each crawled with the configured max depth

        Returns:
            Ranked word counts and number of distinct URLs visited

        Raises:
            CrawlerError: If the worker pool failed or a task raised outside page parsing
        """
        deadline = self._clock() + self.timeout_seconds
        logger.info(f"Starting crawl of {len(start_urls)} seed URL(s) with {self.worker_count} "
                    f"worker(s), max depth {self.max_depth}, timeout {self.timeout_seconds}s")

        with ThreadPoolManager(self.worker_count) as pool:
            traversal = _Traversal(pool, self.page_parser, self.exclusions, self._clock)
            traversal.start(start_urls, self.max_depth, deadline)
            traversal.join.wait()
            pool_stats = pool.get_pool_stats()

        failure = traversal.join.first_failure
        if failure is not None:
            raise CrawlerError(
                f"Crawl aborted: {failure}",
                {
                    "failures": traversal.join.failure_count,
                    "urls_visited": len(traversal.visited)
                }
            ) from failure

        result = self._build_result(traversal.counts, traversal.visited)
        logger.info(f"Crawl finished: {result.urls_visited} URL(s) visited, "
                    f"{len(traversal.counts)} distinct word(s), "
                    f"{pool_stats['tasks_submitted']} task(s) run")
        return result

    def _build_result(self, counts: ThreadSafeWordCounts, visited: ThreadSafeSet) -> CrawlResult:
        urls_visited = len(visited)
        if counts.is_empty():
            return CrawlResult(word_counts={}, urls_visited=urls_visited)
        ranked = sort_word_counts(counts.snapshot(), self.popular_word_count)
        return CrawlResult(word_counts=dict(ranked), urls_visited=urls_visited)
