"""
Data models for the concurrent crawl engine.
"""

from dataclasses import dataclass, field
from typing import Dict, Any

from webcrawler.utils.errors import ValidationError


@dataclass(frozen=True)
class CrawlTask:
    """One URL to visit at one remaining-depth level, sharing a traversal deadline."""
    url: str
    remaining_depth: int
    deadline: float
    
    def __post_init__(self):
        """Validate task after initialization."""
        if self.remaining_depth < 0:
            raise ValidationError(
                "remaining_depth must be non-negative",
                {"url": self.url, "remaining_depth": self.remaining_depth}
            )
    
    def is_exhausted(self) -> bool:
        """True when no further hops are allowed from this task."""
        return self.remaining_depth == 0
    
    def is_expired(self, now: float) -> bool:
        """True when now is at or after the deadline."""
        return now >= self.deadline
    
    def child(self, url: str) -> "CrawlTask":
        """
        Build the task for an outbound link of this page.
        
        Args:
            url: Outbound link
            
        Returns:
            Task one level deeper with the same deadline
        """
        return CrawlTask(url=url, remaining_depth=self.remaining_depth - 1, deadline=self.deadline)


@dataclass(frozen=True)
class CrawlResult:
    """Final outcome of one traversal."""
    word_counts: Dict[str, int] = field(default_factory=dict)
    urls_visited: int = 0
    
    def to_dict(self) -> Dict[str, Any]:
        """
        Convert result to its JSON shape.
        
        Returns:
            Dictionary with wordCounts in rank order and urlsVisited
        """
        return {
            "wordCounts": dict(self.word_counts),
            "urlsVisited": self.urls_visited
        }
