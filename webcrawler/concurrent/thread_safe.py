"""
Thread-safe data structures shared by crawl tasks.
"""

import threading
from typing import Any, Dict, Mapping, Set


class ThreadSafeCounter:
    """Integer counter whose updates return the value they produced."""
    
    def __init__(self, initial_value: int = 0):
        self._value = initial_value
        self._lock = threading.Lock()
    
    def increment(self, amount: int = 1) -> int:
        with self._lock:
            self._value += amount
            return self._value
    
    def decrement(self, amount: int = 1) -> int:
        with self._lock:
            self._value -= amount
            return self._value
    
    def get_value(self) -> int:
        with self._lock:
            return self._value
    
    def __repr__(self) -> str:
        return f"ThreadSafeCounter(value={self.get_value()})"


class ThreadSafeSet:
    """Thread-safe set with an atomic claim operation."""
    
    def __init__(self):
        self._set: Set[Any] = set()
        self._lock = threading.Lock()
    
    def try_claim(self, item: Any) -> bool:
        """
        Claim an item for exclusive processing.
        
        Exactly one of any number of concurrent callers claiming the same item
        gets True; every later or losing caller gets False.
        """
        with self._lock:
            if item in self._set:
                return False
            self._set.add(item)
            return True
    
    def size(self) -> int:
        """Get set size."""
        with self._lock:
            return len(self._set)
    
    def __len__(self) -> int:
        return self.size()
    
    def __repr__(self) -> str:
        return f"ThreadSafeSet(size={self.size()})"


class ThreadSafeWordCounts:
    """Cumulative word counts that many workers can merge into concurrently."""
    
    def __init__(self):
        self._counts: Dict[str, int] = {}
        self._lock = threading.Lock()
    
    def merge(self, word: str, count: int) -> int:
        """
        Add count to the total for word, inserting it if absent.
        
        Args:
            word: Word to update
            count: Non-negative occurrence count to add
            
        Returns:
            New total for the word
        """
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count} for {word!r}")
        with self._lock:
            total = self._counts.get(word, 0) + count
            self._counts[word] = total
            return total
    
    def merge_all(self, word_counts: Mapping[str, int]) -> None:
        """
        Merge one page's word counts.
        
        Args:
            word_counts: Mapping of word to occurrences on a single page
        """
        for word, count in word_counts.items():
            self.merge(word, count)
    
    def snapshot(self) -> Dict[str, int]:
        """
        Get a copy of all totals.
        
        Returns:
            Dictionary of word to total count
        """
        with self._lock:
            return dict(self._counts)
    
    def is_empty(self) -> bool:
        with self._lock:
            return not self._counts
    
    def __len__(self) -> int:
        with self._lock:
            return len(self._counts)
    
    def __repr__(self) -> str:
        return f"ThreadSafeWordCounts(words={len(self)})"
