"""
Text utility functions.
"""
import re

_TAG_PATTERN = re.compile(r"<[^>]*>?")


def sanitize_text(value: str, max_length: int = 120) -> str:
    """
    Strip HTML tags and surrounding whitespace, then cap the length.

    Args:
        value: Raw user or model supplied text
        max_length: Maximum number of characters kept

    Returns:
        Sanitized text (may be empty)
    """
    if not value:
        return ""
    return _TAG_PATTERN.sub("", value).strip()[:max_length]
