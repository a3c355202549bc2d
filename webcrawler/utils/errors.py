"""
Custom exception classes and error handling utilities.
"""

from typing import Optional, Dict, Any
import traceback


class WebCrawlerError(Exception):
    """Base exception for all web crawler errors."""
    
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class CrawlerError(WebCrawlerError):
    """Exception raised during fetching, parsing or traversal."""
    pass


class ConfigurationError(WebCrawlerError):
    """Exception raised for configuration-related issues."""
    pass


class ValidationError(WebCrawlerError):
    """Exception raised for invalid model values."""
    pass


class OutputError(WebCrawlerError):
    """Exception raised when results or profile data cannot be written."""
    pass


def handle_error(
    error: Exception,
    logger,
    context: Optional[Dict[str, Any]] = None,
    reraise: bool = True
) -> None:
    """
    Handle and log errors with context information.
    
    Args:
        error: The exception that occurred
        logger: Logger instance to use for logging
        context: Additional context information
        reraise: Whether to reraise the exception after logging
    """
    error_context = {
        "error_type": type(error).__name__,
        "error_message": str(error),
        **(context or {})
    }
    
    if isinstance(error, WebCrawlerError):
        error_context.update(error.details)
    
    logger.error(f"Error occurred: {error_context}")
    logger.debug("".join(traceback.format_exception(type(error), error, error.__traceback__)))
    
    if reraise:
        raise error
