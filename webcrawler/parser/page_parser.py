"""
Page fetching and parsing.

A page parser turns one URL into its outbound links and per-word counts. The
crawler treats it as opaque: it may be slow, and any exception it raises only
affects the page being parsed.
"""

import re
from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Pattern, Union
from urllib.parse import urldefrag, urljoin, urlparse
from urllib.request import url2pathname

from bs4 import BeautifulSoup

from webcrawler.profiler import profiled
from webcrawler.utils.errors import CrawlerError
from webcrawler.utils.logging import get_logger
from webcrawler.utils.patterns import compile_patterns
from .http_client import HTTPClient


logger = get_logger(__name__)

LINK_SCHEMES = ("http", "https", "file")
_NON_NAVIGABLE_PREFIXES = ("javascript:", "mailto:", "tel:", "data:")
_WHITESPACE = re.compile(r"\s+")
_NON_WORD = re.compile(r"\W")


@dataclass(frozen=True)
class PageParseResult:
    """Outbound links and word counts of one page."""
    links: List[str] = field(default_factory=list)
    word_counts: Dict[str, int] = field(default_factory=dict)


class PageParser(ABC):
    """Interface of page parsers consumed by the crawler."""
    
    @abstractmethod
    def parse(self, url: str) -> PageParseResult:
        """
        Fetch and parse a page.
        
        Raises:
            Exception: Any failure; the crawler treats it as a page with no data
        """


def _dedupe_keep_order(urls: Iterable[str]) -> List[str]:
    seen = set()
    out: List[str] = []
    for u in urls:
        if u not in seen:
            seen.add(u)
            out.append(u)
    return out


def extract_links(soup: BeautifulSoup, base_url: str) -> List[str]:
    """
    Extract absolute, fragment-free links from <a href> tags.
    
    Relative links are resolved against base_url; non-navigable hrefs
    (javascript:, mailto:, ...) and unsupported schemes are dropped.
    """
    candidates: List[str] = []
    for a in soup.find_all("a", href=True):
        href = a.get("href", "").strip()
        if not href or href.lower().startswith(_NON_NAVIGABLE_PREFIXES):
            continue
        try:
            abs_url, _ = urldefrag(urljoin(base_url, href))
        except ValueError:
            logger.debug(f"Ignoring malformed link {href!r} on {base_url}")
            continue
        if urlparse(abs_url).scheme.lower() in LINK_SCHEMES:
            candidates.append(abs_url)
    return _dedupe_keep_order(candidates)


def count_words(text: str, ignored_words: Iterable[Pattern] = ()) -> Dict[str, int]:
    """
    Count words in text.
    
    Words are whitespace-separated tokens with non-word characters removed,
    lower-cased. Empty words and words fully matching an ignored pattern are
    not counted.
    """
    ignored = list(ignored_words)
    counts: Counter = Counter()
    for token in _WHITESPACE.split(text):
        word = _NON_WORD.sub("", token).lower()
        if not word:
            continue
        if any(pattern.fullmatch(word) for pattern in ignored):
            continue
        counts[word] += 1
    return dict(counts)


class HtmlPageParser(PageParser):
    """Fetches pages over HTTP(S) or from file: URLs and parses them as HTML."""
    
    def __init__(self, http_client: Optional[HTTPClient] = None,
                 ignored_words: Iterable[Union[str, Pattern]] = ()):
        """
        Initialize parser.
        
        Args:
            http_client: Client for http(s) URLs (a default one is created if omitted)
            ignored_words: Regular expressions of words that are never counted
        """
        self.http_client = http_client or HTTPClient()
        self.ignored_words = compile_patterns(ignored_words)
    
    @profiled
    def parse(self, url: str) -> PageParseResult:
        """
        Fetch and parse a page.
        
        Args:
            url: http, https or file URL
            
        Returns:
            Parsed links and word counts
            
        Raises:
            CrawlerError: If the page cannot be fetched
        """
        html = self._fetch(url)
        soup = BeautifulSoup(html, "html.parser")
        for tag in soup(["script", "style"]):
            tag.decompose()
        
        return PageParseResult(
            links=extract_links(soup, url),
            word_counts=count_words(soup.get_text(" "), self.ignored_words)
        )
    
    def _fetch(self, url: str) -> str:
        scheme = urlparse(url).scheme.lower()
        if scheme == "file":
            return self._read_file(url)
        if scheme in ("http", "https"):
            return self.http_client.get(url).text
        raise CrawlerError(f"Unsupported URL scheme: {scheme or '(none)'}", {"url": url})
    
    @staticmethod
    def _read_file(url: str) -> str:
        path = Path(url2pathname(urlparse(url).path))
        try:
            return path.read_text(encoding="utf-8", errors="ignore")
        except OSError as e:
            raise CrawlerError(f"Failed to read {path}: {e}", {"url": url}) from e
    
    def close(self) -> None:
        self.http_client.close()
