"""
Parallel Web Crawler

Crawls a hyperlink graph from seed URLs on a bounded thread pool and reports
the most popular words across every visited page.
"""

__version__ = "1.0.0"
