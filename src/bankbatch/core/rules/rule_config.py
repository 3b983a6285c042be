"""
Rule configuration management.

Loads validation rules from YAML files and provides utilities
for building rule configurations in code. The package ships
``config/validation_rules.yaml``, which is the default rule set.
"""

from importlib import resources
from pathlib import Path
from typing import IO, Any

import yaml

DEFAULT_RULES_RESOURCE = "validation_rules.yaml"


class RuleConfigLoader:
    """
    Loads validation rules from YAML configuration files.

    Expected YAML format:
    ```yaml
    rules:
      - type: bic_account
      - type: name_length
        params:
          max_length: 32
    ```
    """

    def __init__(self, config_path: str | Path):
        """
        Initialize the rule config loader.

        Args:
            config_path: Path to the YAML configuration file
        """
        self.config_path = Path(config_path)
        if not self.config_path.exists():
            raise FileNotFoundError(f"Rule configuration file not found: {config_path}")

    def load_rules(self) -> list[dict[str, Any]]:
        """
        Load and parse validation rules from YAML file.

        Returns:
            List of rule dictionaries suitable for RuleEngine

        Raises:
            ValueError: If YAML is invalid or missing required fields
        """
        with open(self.config_path, encoding="utf-8") as f:
            return parse_rule_config(f, str(self.config_path))


def load_default_rules() -> list[dict[str, Any]]:
    """Load the rule set shipped with the package."""
    text = resources.files("bankbatch.config").joinpath(DEFAULT_RULES_RESOURCE).read_text(encoding="utf-8")
    return parse_rule_config(text, DEFAULT_RULES_RESOURCE)


def parse_rule_config(source: str | IO[str], origin: str) -> list[dict[str, Any]]:
    """
    Parse a YAML rule document.

    Args:
        source: YAML text or open text stream
        origin: File name used in error messages

    Returns:
        List of rule dictionaries suitable for RuleEngine

    Raises:
        ValueError: If YAML is invalid or missing required fields
    """
    try:
        config = yaml.safe_load(source)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {origin}: {e}")

    if not isinstance(config, dict) or "rules" not in config:
        raise ValueError(f"Configuration file {origin} must contain 'rules' section")

    rule_defs = config["rules"]
    if not isinstance(rule_defs, list):
        raise ValueError("'rules' must be a list")

    return [_parse_rule(rule_def, idx) for idx, rule_def in enumerate(rule_defs)]


def _parse_rule(rule_def: dict[str, Any], idx: int) -> dict[str, Any]:
    """
    Parse a single rule definition.

    Args:
        rule_def: The rule definition from YAML
        idx: Position of the rule (for naming)

    Returns:
        Parsed rule dictionary

    Raises:
        ValueError: If rule definition is invalid
    """
    if not isinstance(rule_def, dict) or "type" not in rule_def:
        raise ValueError(f"Rule #{idx} is missing 'type'")

    rule_type = rule_def["type"]
    return {
        "rule_name": rule_def.get("name", f"{rule_type}_{idx}"),
        "rule_type": rule_type,
        "field_name": rule_def.get("field"),
        "parameters": rule_def.get("params", rule_def.get("parameters", {})) or {},
        "enabled": rule_def.get("enabled", True),
    }


class RuleConfigBuilder:
    """
    Programmatically build rule configurations (for testing or dynamic rules).
    """

    def __init__(self):
        """Initialize empty rule configuration."""
        self.rules: list[dict[str, Any]] = []

    def add_bic_account(self, enabled: bool = True) -> "RuleConfigBuilder":
        """Add the receiver BIC / beneficiary account cross-check."""
        self.rules.append({
            "rule_name": "bic_account",
            "rule_type": "bic_account",
            "field_name": "receiver_bic",
            "parameters": {},
            "enabled": enabled,
        })
        return self

    def add_name_length(self, max_length: int = 32, enabled: bool = True) -> "RuleConfigBuilder":
        """Add the beneficiary name length ceiling."""
        self.rules.append({
            "rule_name": "beneficiary_name_length",
            "rule_type": "name_length",
            "field_name": "beneficiary_name",
            "parameters": {"max_length": max_length},
            "enabled": enabled,
        })
        return self

    def build(self) -> list[dict[str, Any]]:
        """Build and return the rule configuration."""
        return self.rules
