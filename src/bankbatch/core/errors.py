"""
Hard-failure exceptions for the transfer batch workflow.

Per-record rule failures are never raised from here; they are captured in
``TransactionRecord.validation_error``. These exceptions cover structural
problems that the caller has to surface to the user.
"""


class BankBatchError(Exception):
    """Base class for bankbatch errors."""
    pass


class IngestionError(BankBatchError):
    """Raised when source rows cannot be obtained (no sources, unreadable file)."""
    pass


class RecordNotFoundError(BankBatchError, KeyError):
    """Raised when a record id is not part of the current record set."""

    def __init__(self, record_id: str):
        self.record_id = record_id
        super().__init__(f"Record not found: {record_id}")

    def __str__(self) -> str:
        return f"Record not found: {self.record_id}"


class ExportGateError(BankBatchError):
    """
    Raised when export is requested while the record set is not clean.

    Attributes:
        reasons: Human-readable reasons the gate rejected the export
    """

    def __init__(self, reasons: list[str]):
        self.reasons = list(reasons)
        super().__init__("Export blocked: " + "; ".join(self.reasons))
