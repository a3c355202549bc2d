"""
JSON writer for crawl results.
"""

import json
from pathlib import Path
from typing import TextIO, Union

from webcrawler.concurrent.models import CrawlResult
from webcrawler.utils.errors import OutputError
from webcrawler.utils.logging import get_logger


logger = get_logger(__name__)


class CrawlResultWriter:
    """Writes a CrawlResult as JSON, keeping word counts in rank order."""
    
    def __init__(self, result: CrawlResult):
        if result is None:
            raise ValueError("result must not be None")
        self.result = result
    
    def write(self, path: Union[str, Path]) -> None:
        """
        Append the result to a file, creating it if needed.
        
        Args:
            path: Destination file
            
        Raises:
            OutputError: If the file cannot be written
        """
        try:
            with open(path, 'a', encoding='utf-8') as f:
                self.write_to(f)
        except OSError as e:
            logger.error(f"Failed to write crawl result to {path}: {e}")
            raise OutputError(f"Failed to write crawl result: {e}", {"path": str(path)}) from e
        logger.info(f"Crawl result written to {path}")
    
    def write_to(self, stream: TextIO) -> None:
        """
        Write the result to an open text stream.
        
        Args:
            stream: Destination stream; it is not closed
        """
        json.dump(self.result.to_dict(), stream, ensure_ascii=False)
        stream.write("\n")
