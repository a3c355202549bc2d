"""
Ranking of aggregated word counts.
"""

from typing import Iterable, List, Mapping, Tuple, Union


WordCountItems = Union[Mapping[str, int], Iterable[Tuple[str, int]]]


def _rank_key(entry: Tuple[str, int]) -> Tuple[int, int, str]:
    word, count = entry
    return (-count, -len(word), word)


def sort_word_counts(word_counts: WordCountItems, popular_word_count: int) -> List[Tuple[str, int]]:
    """
    Rank word counts and keep the most popular ones.
    
    Order is total and independent of input order:
    1. higher count first
    2. on equal count, longer word first
    3. on equal count and length, lexicographically smaller word first
    
    Args:
        word_counts: Mapping of word to count, or (word, count) pairs such as a
            previously ranked list
        popular_word_count: Maximum number of entries to return
        
    Returns:
        List of (word, count) pairs in rank order
    """
    if popular_word_count < 0:
        raise ValueError(f"popular_word_count must be non-negative, got {popular_word_count}")
    
    items = word_counts.items() if isinstance(word_counts, Mapping) else word_counts
    return sorted(items, key=_rank_key)[:popular_word_count]
