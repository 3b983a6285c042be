"""
bankbatch - validation, duplicate detection and bank grouping for bank-transfer batches.
"""

__version__ = "0.1.0"
