"""
Core record logic: normalization, validation, duplicate detection and bank grouping.
"""
