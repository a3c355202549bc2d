"""
Regular expression helpers for URL and word filters.
"""

import re
from typing import Iterable, List, Pattern, Union

from webcrawler.utils.errors import ConfigurationError


def compile_patterns(patterns: Iterable[Union[str, Pattern]]) -> List[Pattern]:
    """
    Compile regular expressions, keeping already compiled ones as they are.
    
    Raises:
        ConfigurationError: If a pattern is not a valid regular expression
    """
    compiled = []
    for pattern in patterns:
        if isinstance(pattern, re.Pattern):
            compiled.append(pattern)
            continue
        try:
            compiled.append(re.compile(pattern))
        except re.error as e:
            raise ConfigurationError(
                f"Invalid pattern {pattern!r}: {e}",
                {"pattern": pattern}
            ) from e
    return compiled
