"""Selection and stringification of column sample values.

Sample values end up inside LLM prompts, so this module decides which values
are safe to show. A column whose samples contain an email address or a link is
hidden entirely; a column of dates is summarized by its first date.
"""

from __future__ import annotations

import datetime
import re
from decimal import Decimal
from typing import Any, Iterable, List

EMAIL_PATTERN = re.compile(r"^[\w.-]+@[\w.-]+\.\w+$")

URL_MARKERS = ("http://", "https://")


def is_email(value: str) -> bool:
    """Check whether a string looks like an email address."""
    return EMAIL_PATTERN.match(value) is not None


def contains_url(value: str) -> bool:
    """Check whether a string contains an HTTP/HTTPS URL."""
    return any(marker in value for marker in URL_MARKERS)


def examples_to_str(examples: Iterable[Any]) -> List[str]:
    """Convert raw sample values to display strings.

    Values are scanned in order and the scan stops at the first
    disqualifying value:

    - a date, datetime or time value makes the result that single value;
    - an email-like or URL-containing string makes the result empty.

    ``None`` values are skipped, and empty or whitespace-only strings are
    dropped from the result.

    Args:
        examples: Raw sample values for one column

    Returns:
        Display strings, possibly empty

    Example:
        >>> examples_to_str([1, None, "red"])
        ['1', 'red']
        >>> examples_to_str(["x", "bob@example.com"])
        []
    """
    values: List[Any] = []

    for value in examples:
        if isinstance(value, (datetime.date, datetime.time)):
            values = [value]
            break

        if isinstance(value, (bool, int, float, Decimal)):
            value = str(value)

        if isinstance(value, str) and (is_email(value) or contains_url(value)):
            values = []
            break

        if value is not None:
            values.append(value)

    strings = [str(v) for v in values]
    return [s for s in strings if s.strip()]
