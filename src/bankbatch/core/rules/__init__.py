"""
Validation rule engine and configuration management.
"""

from .rule_config import RuleConfigBuilder, RuleConfigLoader, load_default_rules
from .rule_engine import RuleEngine

__all__ = [
    "RuleEngine",
    "RuleConfigLoader",
    "RuleConfigBuilder",
    "load_default_rules",
]
