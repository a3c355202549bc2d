"""
Method timing profiler.

Methods are marked with @profiled. Profiler.wrap() returns a wrapper around an
object that forwards every attribute to it and records how long each call to a
marked method took, whether it returned or raised.
"""

import functools
import threading
import time
from datetime import datetime, timezone
from email.utils import format_datetime
from pathlib import Path
from typing import Any, Callable, Dict, Optional, TextIO, Union

from webcrawler.utils.logging import get_logger
from webcrawler.utils.errors import OutputError


logger = get_logger(__name__)

_PROFILED_ATTR = "__profiled__"


def profiled(func: Callable) -> Callable:
    """Mark a method so that Profiler wrappers time its calls."""
    setattr(func, _PROFILED_ATTR, True)
    return func


def is_profiled(func: Any) -> bool:
    return bool(getattr(func, _PROFILED_ATTR, False))


def _format_duration(seconds: float) -> str:
    total_ms = int(round(seconds * 1000))
    minutes, remainder = divmod(total_ms, 60_000)
    secs, millis = divmod(remainder, 1000)
    return f"{minutes}m {secs}s {millis}ms"


class ProfilingState:
    """Thread-safe accumulator of elapsed time per profiled method."""
    
    def __init__(self):
        self._durations: Dict[str, float] = {}
        self._calls: Dict[str, int] = {}
        self._lock = threading.Lock()
    
    def record(self, owner: type, method_name: str, elapsed: float) -> None:
        """
        Add elapsed seconds to the total for owner#method_name.
        
        Args:
            owner: Class of the profiled object
            method_name: Name of the profiled method
            elapsed: Elapsed wall-clock time in seconds
        """
        key = f"{owner.__module__}.{owner.__qualname__}#{method_name}"
        with self._lock:
            self._durations[key] = self._durations.get(key, 0.0) + elapsed
            self._calls[key] = self._calls.get(key, 0) + 1
    
    def get_total(self, key: str) -> float:
        with self._lock:
            return self._durations.get(key, 0.0)
    
    def get_call_count(self, key: str) -> int:
        with self._lock:
            return self._calls.get(key, 0)
    
    def keys(self):
        with self._lock:
            return sorted(self._durations)
    
    def write(self, stream: TextIO) -> None:
        """Write one line per method, sorted by key."""
        with self._lock:
            items = sorted(self._durations.items())
        for key, elapsed in items:
            stream.write(f"{key} took {_format_duration(elapsed)}\n")


class _ProfilingWrapper:
    """Forwards attribute access to a delegate, timing profiled methods."""
    
    def __init__(self, delegate: Any, state: ProfilingState, clock: Callable[[], float]):
        object.__setattr__(self, "_delegate", delegate)
        object.__setattr__(self, "_state", state)
        object.__setattr__(self, "_clock", clock)
    
    def __getattr__(self, name: str) -> Any:
        delegate = self._delegate
        attr = getattr(delegate, name)
        class_attr = getattr(type(delegate), name, None)
        if not callable(attr) or not is_profiled(class_attr):
            return attr
        
        state, clock, owner = self._state, self._clock, type(delegate)
        
        @functools.wraps(attr)
        def timed(*args, **kwargs):
            start = clock()
            try:
                return attr(*args, **kwargs)
            finally:
                state.record(owner, name, clock() - start)
        
        return timed
    
    def __setattr__(self, name: str, value: Any) -> None:
        setattr(self._delegate, name, value)
    
    def __repr__(self) -> str:
        return f"Profiled({self._delegate!r})"


class Profiler:
    """Creates profiling wrappers and reports their collected timings."""
    
    def __init__(self, clock: Callable[[], float] = time.perf_counter,
                 now: Optional[Callable[[], datetime]] = None):
        """
        Initialize profiler.
        
        Args:
            clock: Monotonic clock used to measure elapsed time
            now: Wall clock used for the run header
        """
        self._clock = clock
        self._now = now or (lambda: datetime.now(timezone.utc))
        self.state = ProfilingState()
        self.start_time = self._now()
    
    def wrap(self, delegate: Any) -> Any:
        """
        Wrap an object so calls to its @profiled methods are timed.
        
        Args:
            delegate: Object to wrap
            
        Returns:
            Wrapper exposing the same attributes as delegate
            
        Raises:
            ValueError: If the object's class has no @profiled methods
        """
        owner = type(delegate)
        if not any(is_profiled(getattr(owner, name, None)) for name in dir(owner)):
            raise ValueError(f"{owner.__qualname__} has no @profiled methods")
        return _ProfilingWrapper(delegate, self.state, self._clock)
    
    def write_data(self, path: Union[str, Path]) -> None:
        """
        Append profiling data to a file.
        
        Args:
            path: Destination file, created if missing
            
        Raises:
            OutputError: If the file cannot be written
        """
        try:
            with open(path, 'a', encoding='utf-8') as f:
                self.write_data_to(f)
        except OSError as e:
            logger.error(f"Failed to write profile data to {path}: {e}")
            raise OutputError(f"Failed to write profile data: {e}", {"path": str(path)}) from e
    
    def write_data_to(self, stream: TextIO) -> None:
        """Write the run header and per-method totals to an open text stream."""
        stream.write(f"Run at {format_datetime(self.start_time)}\n")
        self.state.write(stream)
        stream.write("\n")
