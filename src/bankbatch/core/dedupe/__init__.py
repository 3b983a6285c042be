"""
Near-duplicate detection over a transfer batch.
"""

from .duplicate_detector import (
    detect_duplicates,
    duplicate_details,
    find_duplicate_positions,
    fuzzy_match,
    remove_duplicates,
)

__all__ = [
    "fuzzy_match",
    "detect_duplicates",
    "find_duplicate_positions",
    "remove_duplicates",
    "duplicate_details",
]
