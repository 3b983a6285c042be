"""
ExportTable model: one bank group laid out for the export writer.
"""

from pydantic import BaseModel, Field

EXPORT_COLUMNS = (
    "Reference",
    "Value Date",
    "Payer Name",
    "Payer Account",
    "Amount",
    "Currency",
    "Receiver BIC",
    "Beneficiary Name",
    "Beneficiary Account",
    "Remittance Information",
    "Details of Charges",
)


class ExportTable(BaseModel):
    """
    Rows of a single bank group, ready to be written as one output artifact.

    Attributes:
        bank_name: Resolved destination bank
        filename: Suggested output file name
        header: Column titles, always EXPORT_COLUMNS
        rows: One list of cell values per record, in header order
    """

    bank_name: str = Field(..., min_length=1)
    filename: str = Field(..., min_length=1)
    header: tuple[str, ...] = EXPORT_COLUMNS
    rows: list[list[str]] = Field(default_factory=list)

    @property
    def record_count(self) -> int:
        return len(self.rows)
