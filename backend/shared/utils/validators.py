"""
Shared validators for input sanitization.
"""

import re
from decimal import Decimal, ROUND_HALF_UP
from typing import Any

from shared.config.constants import Limits


def escape_like_pattern(value: str) -> str:
    """
    Escape special characters in LIKE patterns.

    SQL LIKE uses % and _ as wildcards. This function escapes them
    so user input is always matched literally.
    """
    if not value:
        return value

    # Escape the escape character first, then the wildcards
    value = value.replace("\\", "\\\\")
    value = value.replace("%", "\\%")
    value = value.replace("_", "\\_")
    return value


def sanitize_search_term(term: str | None, max_length: int = Limits.MAX_SEARCH_TERM_LENGTH) -> str:
    """
    Sanitize search term for safe use in queries.

    Trims whitespace, truncates to ``max_length`` and strips control characters.
    """
    if not term:
        return ""

    term = term.strip()

    if len(term) > max_length:
        term = term[:max_length]

    term = re.sub(r"[\x00-\x1f\x7f-\x9f]", "", term)

    return term


def to_money(value: Any) -> Decimal:
    """Convert a number to a Decimal rounded to cents."""
    if value is None:
        return Decimal("0.00")
    return Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

