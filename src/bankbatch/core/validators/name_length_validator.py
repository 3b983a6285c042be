"""
NameLengthValidator - enforces the payment network's beneficiary name ceiling.
"""

from typing import Any

from bankbatch.core.models import TransactionRecord
from bankbatch.core.text import normalize_name

from .base_validator import BaseValidator, ValidationError

DEFAULT_MAX_NAME_LENGTH = 32


class NameLengthValidator(BaseValidator):
    """
    Validates that the normalized beneficiary name fits the length ceiling.

    Parameters:
    - max_length: Maximum normalized length (default 32)
    """

    def __init__(self, field_name: str = "beneficiary_name", parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        self.max_length = self.parameters.get("max_length", DEFAULT_MAX_NAME_LENGTH)
        if not isinstance(self.max_length, int) or self.max_length <= 0:
            raise ValueError(f"max_length must be a positive integer, got {self.max_length!r}")

    def validate(self, record: TransactionRecord) -> None:
        """
        Validate the beneficiary name length.

        Raises:
            ValidationError: If the normalized name is too long
        """
        value = getattr(record, self.field_name, "")
        if len(normalize_name(value)) > self.max_length:
            raise ValidationError(
                rule_name="name_length",
                field_name=self.field_name,
                message=f"Beneficiary name exceeds {self.max_length} characters"
            )

    @property
    def rule_type(self) -> str:
        return "name_length"
