"""
Bank resolution and grouping by receiver BIC.
"""

from .grouper import UNKNOWN_BANK, build_reverse_index, group_by_bank, resolve_bank
from .registry import default_bank_registry, load_bank_registry

__all__ = [
    "UNKNOWN_BANK",
    "build_reverse_index",
    "resolve_bank",
    "group_by_bank",
    "load_bank_registry",
    "default_bank_registry",
]
