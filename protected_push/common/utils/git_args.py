"""Parsing of free-form git argument strings."""

import logging
import shlex
from typing import List

logger = logging.getLogger(__name__)


def parse_git_args(text: str) -> List[str]:
    """Split an argument string using shell quoting rules.

    Args:
        text: Raw argument string, e.g. ``-a --no-verify --author='Bot <b@x.io>'``

    Returns:
        Argument list, empty for blank input

    Raises:
        ValueError: If the string has unbalanced quotes
    """
    parsed = shlex.split(text or "")
    logger.debug(f"Git args parsed:\n    - Original: {text}\n    - Parsed: {parsed}")
    return parsed
