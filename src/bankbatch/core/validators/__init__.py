"""
Validation rule implementations.

Provides the BIC/account cross-check and the beneficiary name length ceiling.
"""

from .base_validator import BaseValidator, ValidationError
from .bic_account_validator import BicAccountValidator, extract_bank_code, validate_bic_account
from .name_length_validator import NameLengthValidator

__all__ = [
    "BaseValidator",
    "ValidationError",
    "BicAccountValidator",
    "NameLengthValidator",
    "extract_bank_code",
    "validate_bic_account",
]
