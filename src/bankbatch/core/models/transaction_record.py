"""
TransactionRecord model representing one payment instruction in a batch.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bankbatch.core.text import normalize_name

# Fields the reviewer may edit; everything else is owned by the pipeline.
MUTABLE_FIELDS = frozenset({
    "payer_name",
    "payer_account",
    "amount",
    "receiver_bic",
    "beneficiary_account",
    "beneficiary_name",
    "remittance_information",
})


class TransactionRecord(BaseModel):
    """
    A single payment instruction ingested from a spreadsheet row.

    Records are treated as values: every edit produces a new instance through
    ``with_updates`` so the beneficiary name is always re-normalized.

    Attributes:
        id: Pipeline-assigned identifier, unique within a record set
        reference: Opaque token assigned once at ingestion
        value_date: Ingestion date stamp (YYYYMMDD)
        payer_name: Origin account holder
        payer_account: Origin account number
        amount: Transfer amount as text
        currency: Fixed pipeline currency
        receiver_bic: Destination bank identifier code
        beneficiary_account: Destination account number
        beneficiary_name: Destination account holder (normalized)
        remittance_information: Free text
        details_of_charges: Fixed pipeline charge code
        validation_error: "; "-joined rule failures, empty/None when valid
        is_duplicate: Flag from the last duplicate detection pass
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "combined-row-0",
                "reference": "K3J9Q0ZXA",
                "value_date": "20250114",
                "payer_name": "Electricity Transmission Co",
                "payer_account": "IQ98TRIQ979000000012345",
                "amount": "250000",
                "currency": "IQD",
                "receiver_bic": "RAFBIQB1098",
                "beneficiary_account": "IQ12RAFB098000000067890",
                "beneficiary_name": "Ahmed Ali",
                "remittance_information": "January salary",
                "details_of_charges": "SLEV",
                "validation_error": None,
                "is_duplicate": False,
            }
        }
    )

    id: str = Field(..., min_length=1)
    reference: str = ""
    value_date: str = ""
    payer_name: str = ""
    payer_account: str = ""
    amount: str = ""
    currency: str = ""
    receiver_bic: str = ""
    beneficiary_account: str = ""
    beneficiary_name: str = ""
    remittance_information: str = ""
    details_of_charges: str = ""
    validation_error: str | None = None
    is_duplicate: bool = False

    @field_validator("beneficiary_name", mode="before")
    @classmethod
    def normalize_beneficiary_name(cls, v):
        """Keep raw ingested text with control characters out of the record."""
        return normalize_name("" if v is None else str(v))

    @property
    def is_valid(self) -> bool:
        return not self.validation_error

    def with_updates(self, **fields: Any) -> "TransactionRecord":
        """
        Return a validated copy with the given fields replaced.

        Unlike ``model_copy(update=...)`` this runs field validators, so a new
        beneficiary name is normalized.
        """
        return TransactionRecord.model_validate({**self.model_dump(), **fields})

    def to_export_row(self) -> list[str]:
        """Return the record's values in export column order."""
        return [
            self.reference,
            self.value_date,
            self.payer_name,
            self.payer_account,
            self.amount,
            self.currency,
            self.receiver_bic,
            self.beneficiary_name,
            self.beneficiary_account,
            self.remittance_information,
            self.details_of_charges,
        ]
