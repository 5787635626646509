"""
Text Utilities

Helper functions for building lookup keys and search queries.
"""

import re


def strip_punctuation(text: str) -> str:
    """
    Remove everything except word characters and whitespace.

    Args:
        text: Raw text (e.g., "Galaxy S24+")

    Returns:
        Cleaned text (e.g., "Galaxy S24")
    """
    if not text:
        return ""
    return re.sub(r'[^\w\s]', '', text).strip()


def slugify(text: str) -> str:
    """
    Build a lowercase dash-separated slug for CDN paths.

    Example:
        >>> slugify("iPhone 15 Pro")
        'iphone-15-pro'
    """
    cleaned = strip_punctuation(text).lower()
    return re.sub(r'\s+', '-', cleaned)


def normalize_whitespace(text: str) -> str:
    """Collapse runs of whitespace to single spaces."""
    if not text:
        return ""
    return re.sub(r'\s+', ' ', text).strip()
