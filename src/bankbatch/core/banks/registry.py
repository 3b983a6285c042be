"""
Loading the bank registry from YAML.

Expected YAML format:
```yaml
banks:
  "Rafidain Bank":
    - RAFBIQB1098
  "Trade Bank of Iraq":
    - TRIQIQBA979
    - TRIQIQBA976
```
"""

from importlib import resources
from pathlib import Path

import yaml
from pydantic import ValidationError

from bankbatch.core.models import BankRegistry

DEFAULT_REGISTRY_RESOURCE = "bank_registry.yaml"


def _parse_registry(config: object, origin: str) -> BankRegistry:
    if not isinstance(config, dict) or "banks" not in config:
        raise ValueError(f"Bank registry {origin} must contain a 'banks' section")

    banks = config["banks"]
    if not isinstance(banks, dict):
        raise ValueError(f"'banks' in {origin} must map bank names to BIC lists")

    mapping: dict[str, list[str]] = {}
    for name, codes in banks.items():
        if isinstance(codes, str):
            codes = [codes]
        if not isinstance(codes, list) or not codes:
            raise ValueError(f"Bank '{name}' in {origin} must list at least one BIC code")
        mapping[str(name)] = [str(code).strip() for code in codes]

    try:
        return BankRegistry.from_mapping(mapping)
    except ValidationError as e:
        raise ValueError(f"Invalid bank registry {origin}: {e}")


def load_bank_registry(path: str | Path) -> BankRegistry:
    """
    Load a bank registry from a YAML file.

    Args:
        path: Path to the registry file

    Returns:
        Immutable BankRegistry in file order

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not a valid registry
    """
    registry_path = Path(path)
    if not registry_path.exists():
        raise FileNotFoundError(f"Bank registry file not found: {path}")

    with open(registry_path, encoding="utf-8") as f:
        try:
            config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {registry_path}: {e}")

    return _parse_registry(config, str(registry_path))


def default_bank_registry() -> BankRegistry:
    """Load the registry shipped with the package (reference deployment banks)."""
    text = resources.files("bankbatch.config").joinpath(DEFAULT_REGISTRY_RESOURCE).read_text(encoding="utf-8")
    return _parse_registry(yaml.safe_load(text), DEFAULT_REGISTRY_RESOURCE)
