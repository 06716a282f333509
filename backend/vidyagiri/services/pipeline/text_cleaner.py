"""Text cleaning and normalization utilities for extracted page content."""

import re
from typing import Optional


def clean_text(text: Optional[str]) -> str:
    """Remove characters that should never reach an embedding or prompt.

    This function performs the following operations:
    1. Handles None/empty input
    2. Removes control characters (except newlines and tabs)
    3. Removes lone UTF-16 surrogates
    4. Strips leading/trailing whitespace

    Args:
        text: The text to clean. Can be None.

    Returns:
        Cleaned text string.
    """
    if not text:
        return ""

    # \x00-\x08, \x0b, \x0c, \x0e-\x1f, \x7f-\x9f: control characters
    text = re.sub(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]', '', text)

    # UTF-16 surrogates cannot be encoded in UTF-8
    text = re.sub(r'[\ud800-\udfff]', '', text)

    return text.strip()


def collapse_whitespace(text: Optional[str]) -> str:
    """Collapse every whitespace run, newlines included, to a single space.

    Args:
        text: The text to normalize. Can be None.

    Returns:
        Single-line text with no leading/trailing whitespace.

    Examples:
        >>> collapse_whitespace("Hello \\n\\n  world\\t!")
        'Hello world !'
    """
    if not text:
        return ""

    return re.sub(r'\s+', ' ', text).strip()
