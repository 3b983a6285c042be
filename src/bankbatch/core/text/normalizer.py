"""
Name normalization shared by validation and duplicate detection.
"""

import re

# C0 and C1 control ranges, zero-width space/non-joiner/joiner, byte order mark
_INVISIBLE_CHARS = re.compile(r"[\x00-\x1f\x7f-\x9f\u200b-\u200d\ufeff]")
_WHITESPACE_RUN = re.compile(r"\s+")


def normalize_name(text: str | None) -> str:
    """
    Clean a free-text name field.

    Removes control and zero-width characters, collapses whitespace runs to a
    single space and trims both ends. Idempotent.

    Args:
        text: Raw name text (None is treated as empty)

    Returns:
        Normalized name

    Examples:
        >>> normalize_name("A\\u200bb  c")
        'Ab c'
    """
    if not text:
        return ""
    cleaned = _INVISIBLE_CHARS.sub("", text)
    return _WHITESPACE_RUN.sub(" ", cleaned).strip()


def tokenize_name(text: str | None) -> set[str]:
    """Return the lower-cased token set of a normalized name."""
    return {token.lower() for token in normalize_name(text).split(" ") if token}
