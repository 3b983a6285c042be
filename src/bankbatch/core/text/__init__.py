"""
Free-text cleanup helpers.
"""

from .normalizer import normalize_name, tokenize_name

__all__ = [
    "normalize_name",
    "tokenize_name",
]
