"""
BicAccountValidator - checks that a beneficiary account belongs to the receiver bank.

The expected bank code is cut out of the receiver BIC with a length-dependent
slice table and must appear (case-insensitively) inside the beneficiary account:

    length 8 or 9   chars [0:4] + [5:8]
    length 10       chars [0:4] + [6:9]
    length >= 11    chars [0:4] + [8:11]

Rafidain Bank (BICs starting with "RAFB") numbers its accounts with its own
branch code, so an account containing "RAFB" plus three digits is accepted
outright for long RAFB BICs.
"""

import re
from typing import Any

from bankbatch.core.models import TransactionRecord

from .base_validator import BaseValidator, ValidationError

MIN_BIC_LENGTH = 8
RAFIDAIN_PREFIX = "RAFB"
_RAFIDAIN_ACCOUNT_CODE = re.compile(r"RAFB[0-9]{3}")


def extract_bank_code(receiver_bic: str) -> str:
    """
    Cut the expected bank code fragment out of a receiver BIC.

    Args:
        receiver_bic: BIC of at least 8 characters

    Returns:
        Fragment expected inside the beneficiary account

    Raises:
        ValueError: If the BIC is shorter than 8 characters
    """
    length = len(receiver_bic)
    if length < MIN_BIC_LENGTH:
        raise ValueError(f"Receiver BIC must be at least {MIN_BIC_LENGTH} characters")

    if length >= 11:
        return receiver_bic[0:4] + receiver_bic[8:11]
    if length == 10:
        return receiver_bic[0:4] + receiver_bic[6:9]
    return receiver_bic[0:4] + receiver_bic[5:8]


def validate_bic_account(receiver_bic: str, beneficiary_account: str) -> str | None:
    """
    Check that the beneficiary account matches the receiver BIC.

    Missing data is not an error at this layer: if either value is empty the
    check is skipped.

    Args:
        receiver_bic: Destination bank identifier code
        beneficiary_account: Destination account number

    Returns:
        Error message, or None when the pair is consistent
    """
    if not receiver_bic or not beneficiary_account:
        return None

    if len(receiver_bic) < MIN_BIC_LENGTH:
        return f"Receiver BIC must be at least {MIN_BIC_LENGTH} characters"

    if len(receiver_bic) >= 11 and receiver_bic.startswith(RAFIDAIN_PREFIX):
        if _RAFIDAIN_ACCOUNT_CODE.search(beneficiary_account):
            return None

    bank_code = extract_bank_code(receiver_bic)
    if bank_code.upper() not in beneficiary_account.upper():
        return f'BIC code "{bank_code}" not found in beneficiary account'

    return None


class BicAccountValidator(BaseValidator):
    """
    Cross-validates receiver_bic against beneficiary_account.

    Re-runs whenever either field changes; edits to the account must re-check
    the BIC even though the BIC itself did not change.
    """

    def __init__(self, field_name: str = "receiver_bic", parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

    def validate(self, record: TransactionRecord) -> None:
        """
        Validate the BIC/account pair of a record.

        Raises:
            ValidationError: If the account does not carry the BIC's bank code
        """
        message = validate_bic_account(record.receiver_bic, record.beneficiary_account)
        if message:
            raise ValidationError(
                rule_name="bic_account",
                field_name=self.field_name,
                message=message
            )

    @property
    def rule_type(self) -> str:
        return "bic_account"
