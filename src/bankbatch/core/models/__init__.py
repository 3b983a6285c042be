"""
Core data models for the transfer batch workflow.

All models use Pydantic for runtime validation and type safety.
"""

from .bank_registry import BankEntry, BankRegistry
from .export_table import EXPORT_COLUMNS, ExportTable
from .pipeline_settings import PipelineSettings
from .transaction_record import MUTABLE_FIELDS, TransactionRecord

__all__ = [
    "TransactionRecord",
    "MUTABLE_FIELDS",
    "BankEntry",
    "BankRegistry",
    "ExportTable",
    "EXPORT_COLUMNS",
    "PipelineSettings",
]
