"""
Pytest configuration and fixtures for bankbatch tests

This module provides shared fixtures for unit, integration, and E2E tests.
"""
import os
from collections.abc import Callable

import pytest

from bankbatch.core.models import BankRegistry, TransactionRecord
from bankbatch.core.rules import RuleEngine


# =======================
# PYTEST CONFIGURATION
# =======================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests that don't require external services"
    )
    config.addinivalue_line(
        "markers", "integration: Tests that exercise several components together"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests that run the CLI"
    )


# =======================
# REGISTRY FIXTURES
# =======================

@pytest.fixture(scope="session")
def bank_registry() -> BankRegistry:
    """
    Small registry covering long BICs, a bare 8-character BIC and a multi-BIC bank

    Returns:
        BankRegistry in a fixed order
    """
    return BankRegistry.from_mapping({
        "Rafidain Bank": ["RAFBIQB1098"],
        "Trade Bank of Iraq": ["TRIQIQBA979", "TRIQIQBA976"],
        "Short Code Bank": ["SHRTIQBA"],
    })


# =======================
# RECORD FIXTURES
# =======================

@pytest.fixture
def make_record() -> Callable[..., TransactionRecord]:
    """
    Factory for valid records; keyword arguments override fields

    Returns:
        Callable building a TransactionRecord
    """
    counter = {"n": 0}

    def _make(**overrides) -> TransactionRecord:
        counter["n"] += 1
        fields = {
            "id": f"rec-{counter['n']}",
            "reference": f"REF{counter['n']:06d}",
            "value_date": "20250115",
            "payer_name": "Electricity Transmission Co",
            "payer_account": "IQ98TRIQ979000012345",
            "amount": "250000",
            "currency": "IQD",
            "receiver_bic": "TRIQIQBA979",
            "beneficiary_account": "IQ55TRIQ979000011111",
            "beneficiary_name": "Sara Hassan",
            "remittance_information": "January salary",
            "details_of_charges": "SLEV",
        }
        fields.update(overrides)
        return TransactionRecord(**fields)

    return _make


@pytest.fixture(scope="session")
def rule_engine() -> RuleEngine:
    """Default rule set: BIC/account check and 32-character names"""
    return RuleEngine.default()


# =======================
# SHEET FIXTURES
# =======================

SHEET_HEADER = [
    "No", "Date", "Payer Name", "Payer Account", "Amount", "Note",
    "Receiver BIC", "Beneficiary Name", "Beneficiary Account", "Remittance Information",
]


@pytest.fixture
def sheet_header() -> list[str]:
    return list(SHEET_HEADER)


@pytest.fixture
def clean_sheet() -> list[list[object]]:
    """
    Sheet with a header and three valid rows for two banks

    Returns:
        Raw rows as the spreadsheet reader delivers them
    """
    return [
        list(SHEET_HEADER),
        ["1", "", "Electricity Co", "IQ98TRIQ979000012345", "250000", "",
         "RAFBIQB1098", "Ahmed Ali", "IQ12RAFB098000067890", "January salary"],
        ["2", "", "Electricity Co", "IQ98TRIQ979000012345", "180000", "",
         "TRIQIQBA979", "Sara Hassan", "IQ55TRIQ979000011111", "January salary"],
        ["3", "", "Electricity Co", "IQ98TRIQ979000012345", 95000.0, "",
         "TRIQIQBA976", "Omar Khalid", "IQ71TRIQ976000022222", "January salary"],
    ]


# =======================
# CONFIGURATION FIXTURES
# =======================

@pytest.fixture(scope="session")
def test_env_vars():
    """
    Set test environment variables

    This fixture loads config/test.env and sets environment variables
    """
    from dotenv import load_dotenv

    env_path = os.path.join(
        os.path.dirname(os.path.dirname(__file__)),
        "config",
        "test.env"
    )

    if os.path.exists(env_path):
        load_dotenv(env_path, override=True)
