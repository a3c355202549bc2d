"""
Crawl result serialization.
"""

from .result_writer import CrawlResultWriter

__all__ = ['CrawlResultWriter']
