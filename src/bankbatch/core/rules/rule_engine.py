"""
Rule engine for validating transaction records.

The engine runs every enabled rule against a record and folds all failures
into the record's ``validation_error`` field.
"""

from collections.abc import Iterable
from typing import Any

from bankbatch.core.models import TransactionRecord
from bankbatch.core.validators import (
    BaseValidator,
    BicAccountValidator,
    NameLengthValidator,
    ValidationError,
)
from bankbatch.observability.metrics import record_validation_failure

from .rule_config import load_default_rules

ERROR_SEPARATOR = "; "


class RuleEngine:
    """
    Applies the configured rule set to transaction records.

    Every rule is evaluated on every call, whichever field changed, because
    rules cross-check fields.
    """

    VALIDATOR_REGISTRY = {
        "bic_account": BicAccountValidator,
        "name_length": NameLengthValidator,
    }

    DEFAULT_FIELDS = {
        "bic_account": "receiver_bic",
        "name_length": "beneficiary_name",
    }

    def __init__(self, rules: list[dict[str, Any]]):
        """
        Initialize the rule engine with validation rules.

        Args:
            rules: List of rule configurations, each containing:
                   - rule_name: str
                   - rule_type: str (bic_account, name_length)
                   - field_name: str (optional)
                   - parameters: Dict[str, Any] (optional)
                   - enabled: bool (default True)
        """
        self.rules = rules
        self.validators: list[tuple[str, BaseValidator]] = []
        self._build_validators()

    @classmethod
    def default(cls) -> "RuleEngine":
        """Engine with the packaged rule set (BIC/account check, 32-character names)."""
        return cls(load_default_rules())

    def _build_validators(self) -> None:
        """Build validator instances from rule configurations."""
        for rule in self.rules:
            if not rule.get("enabled", True):
                continue

            rule_name = rule["rule_name"]
            rule_type = rule["rule_type"]

            validator_class = self.VALIDATOR_REGISTRY.get(rule_type)
            if not validator_class:
                raise ValueError(f"Unknown rule type: {rule_type}")

            field_name = rule.get("field_name") or self.DEFAULT_FIELDS[rule_type]
            parameters = rule.get("parameters") or {}

            try:
                validator = validator_class(field_name, parameters)
            except Exception as e:
                raise ValueError(f"Failed to create validator for rule '{rule_name}': {e}")
            self.validators.append((rule_name, validator))

    def check(self, record: TransactionRecord) -> list[str]:
        """
        Run every rule against a record.

        Args:
            record: The record to check

        Returns:
            Error messages of all failing rules, in rule order
        """
        messages = []
        for _, validator in self.validators:
            try:
                validator.validate(record)
            except ValidationError as e:
                messages.append(e.message)
                record_validation_failure(validator.rule_type)
        return messages

    def revalidate(self, record: TransactionRecord) -> TransactionRecord:
        """
        Recompute a record's validation_error from the full rule set.

        Args:
            record: The record to revalidate

        Returns:
            Copy of the record with validation_error set (None when clean)
        """
        messages = self.check(record)
        error = ERROR_SEPARATOR.join(messages) if messages else None
        return record.model_copy(update={"validation_error": error})

    def revalidate_all(self, records: Iterable[TransactionRecord]) -> list[TransactionRecord]:
        return [self.revalidate(record) for record in records]

    def get_rule_summary(self) -> dict[str, Any]:
        """
        Get summary of loaded rules.

        Returns:
            Dictionary with rule counts and names
        """
        return {
            "total_rules": len(self.validators),
            "rules": [rule_name for rule_name, _ in self.validators],
        }
