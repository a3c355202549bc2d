"""
HTTP client used by the page parser.
"""

from typing import Dict, Optional

import requests

from webcrawler.utils.logging import get_logger
from webcrawler.utils.errors import CrawlerError


logger = get_logger(__name__)

DEFAULT_USER_AGENT = "webcrawler/1.0 (+https://pypi.org/project/webcrawler/)"


class HTTPClient:
    """Thin wrapper over a requests session with default headers and a timeout."""
    
    def __init__(self, timeout: float = 10.0, user_agent: str = DEFAULT_USER_AGENT,
                 headers: Optional[Dict[str, str]] = None):
        """
        Initialize HTTP client.
        
        Args:
            timeout: Request timeout in seconds
            user_agent: User-Agent header sent with every request
            headers: Additional default headers
        """
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({
            'User-Agent': user_agent,
            'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
            'Accept-Language': 'en-US,en;q=0.5',
        })
        if headers:
            self.session.headers.update(headers)
    
    def get(self, url: str, **kwargs) -> requests.Response:
        """
        Perform GET request.
        
        Args:
            url: URL to request
            **kwargs: Additional arguments for requests
            
        Returns:
            Response object
            
        Raises:
            CrawlerError: If the request fails or returns an error status
        """
        kwargs.setdefault('timeout', self.timeout)
        try:
            logger.debug(f"GET {url}")
            response = self.session.get(url, **kwargs)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise CrawlerError(
                f"HTTP request failed: {e}",
                {"method": "GET", "url": url}
            ) from e
        
        logger.debug(f"GET {url} -> {response.status_code} ({len(response.content)} bytes)")
        return response
    
    def close(self) -> None:
        """Close the HTTP session."""
        if self.session:
            self.session.close()
    
    def __enter__(self):
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
