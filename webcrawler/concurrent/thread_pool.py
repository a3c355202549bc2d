"""
Thread pool manager and structural join tracking for crawl task trees.

Tasks never block a worker while their children run. Instead every task owns a
TaskNode holding one slot for its own processing plus one slot per spawned child.
When a node's slots drop to zero it releases its slot in the parent, so a parent
is settled only after all of its descendants are. Root nodes release their slot
in a ForestJoin, which the orchestrator waits on.
"""

import threading
from concurrent.futures import ThreadPoolExecutor, Future
from typing import Any, Callable, Dict, Optional

from webcrawler.utils.logging import get_logger
from webcrawler.utils.errors import CrawlerError, ValidationError
from .thread_safe import ThreadSafeCounter


logger = get_logger(__name__)


class ForestJoin:
    """Completion barrier over every task tree started by one traversal."""
    
    def __init__(self):
        # Launcher slot, released by seal()
        self._pending = ThreadSafeCounter(1)
        self._settled = threading.Event()
        self._lock = threading.Lock()
        self._first_failure: Optional[BaseException] = None
        self._failure_count = 0
    
    def add_root(self) -> "TaskNode":
        """
        Register a new root task tree.
        
        Returns:
            Node that must be settled once the root task has finished
        """
        self._pending.increment()
        return TaskNode(self)
    
    def seal(self) -> None:
        """Signal that no more roots will be added."""
        self._release()
    
    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Block until every root tree has settled.
        
        Args:
            timeout: Optional maximum wait in seconds
            
        Returns:
            True if the forest settled
        """
        return self._settled.wait(timeout)
    
    def record_failure(self, error: BaseException) -> None:
        """
        Record a fatal error raised while running or scheduling a task.
        
        Args:
            error: Exception to report to the caller after the join
        """
        with self._lock:
            self._failure_count += 1
            if self._first_failure is None:
                self._first_failure = error
        logger.error(f"Fatal crawl task error: {type(error).__name__}: {error}")
    
    def has_failed(self) -> bool:
        with self._lock:
            return self._first_failure is not None
    
    @property
    def first_failure(self) -> Optional[BaseException]:
        with self._lock:
            return self._first_failure
    
    @property
    def failure_count(self) -> int:
        with self._lock:
            return self._failure_count
    
    def _release(self) -> None:
        if self._pending.decrement() == 0:
            self._settled.set()


class TaskNode:
    """Structural join node for a single crawl task."""
    
    def __init__(self, join: ForestJoin, parent: Optional["TaskNode"] = None):
        self._join = join
        self._parent = parent
        # Slot for the task's own processing
        self._outstanding = ThreadSafeCounter(1)
    
    def spawn_child(self) -> "TaskNode":
        """
        Create the node for a child task.
        
        Must be called before this node's own slot is settled.
        
        Returns:
            Child node, settled by whoever runs (or fails to schedule) the child
        """
        self._outstanding.increment()
        return TaskNode(self._join, self)
    
    def settle(self) -> None:
        """
        Release one slot and walk up the ancestors whose subtrees are now done.
        
        Ancestors are walked in a loop, so chains of any depth settle.
        """
        node = self
        while node._outstanding.decrement() == 0:
            if node._parent is None:
                node._join._release()
                return
            node = node._parent


class ThreadPoolManager:
    """Bounded worker pool shared by every task of one traversal."""
    
    def __init__(self, max_workers: int, thread_name_prefix: str = "CrawlerWorker"):
        """
        Initialize thread pool manager.
        
        Args:
            max_workers: Number of worker threads (at least 1)
            thread_name_prefix: Prefix for worker thread names
        """
        if max_workers < 1:
            raise ValidationError("max_workers must be at least 1", {"max_workers": max_workers})
        
        self.max_workers = max_workers
        self.thread_name_prefix = thread_name_prefix
        self._executor: Optional[ThreadPoolExecutor] = None
        self._lock = threading.Lock()
        
        # Statistics
        self._tasks_submitted = ThreadSafeCounter()
        self._tasks_completed = ThreadSafeCounter()
        self._tasks_failed = ThreadSafeCounter()
    
    def start(self) -> None:
        """Create the underlying executor."""
        with self._lock:
            if self._executor is not None:
                raise CrawlerError("ThreadPoolManager already started")
            self._executor = ThreadPoolExecutor(
                max_workers=self.max_workers,
                thread_name_prefix=self.thread_name_prefix
            )
        logger.debug(f"Started pool with {self.max_workers} workers")
    
    def submit(self, fn: Callable[..., Any], *args: Any) -> Future:
        """
        Schedule fn(*args) on a worker.
        
        Args:
            fn: Callable to run
            *args: Positional arguments for fn
            
        Returns:
            Future for the call
            
        Raises:
            CrawlerError: If the pool is not running
            RuntimeError: If the executor refuses new work
        """
        with self._lock:
            executor = self._executor
        if executor is None:
            raise CrawlerError("ThreadPoolManager not started")
        
        future = executor.submit(fn, *args)
        self._tasks_submitted.increment()
        future.add_done_callback(self._on_done)
        return future
    
    def shutdown(self, wait: bool = True) -> None:
        """
        Shut the executor down.
        
        Args:
            wait: Whether to wait for running work to finish
        """
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=wait)
            logger.debug(f"Pool shutdown: {self.get_pool_stats()}")
    
    def is_running(self) -> bool:
        with self._lock:
            return self._executor is not None
    
    def get_pool_stats(self) -> Dict[str, Any]:
        """
        Get thread pool statistics.
        
        Returns:
            Dictionary with pool statistics
        """
        return {
            "max_workers": self.max_workers,
            "tasks_submitted": self._tasks_submitted.get_value(),
            "tasks_completed": self._tasks_completed.get_value(),
            "tasks_failed": self._tasks_failed.get_value(),
            "running": self.is_running()
        }
    
    def _on_done(self, future: Future) -> None:
        if future.cancelled() or future.exception() is not None:
            self._tasks_failed.increment()
        else:
            self._tasks_completed.increment()
    
    def __enter__(self):
        self.start()
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb):
        self.shutdown(wait=True)
