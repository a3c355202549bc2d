"""
Page fetching and HTML parsing.
"""

from .http_client import HTTPClient
from .page_parser import PageParser, PageParseResult, HtmlPageParser, extract_links, count_words

__all__ = [
    'HTTPClient',
    'PageParser',
    'PageParseResult',
    'HtmlPageParser',
    'extract_links',
    'count_words'
]
