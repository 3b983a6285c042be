"""
Maps raw spreadsheet rows onto TransactionRecord.

Rows arrive as 0-indexed cell sequences with the header in row 0. Source
columns used:

    2 payer name            6 receiver BIC
    3 payer account         7 beneficiary name
    4 amount                8 beneficiary account
                            9 remittance information

Currency, charge code, reference and value date are assigned here, never read
from the source.
"""

import secrets
import string
from collections.abc import Sequence
from datetime import date
from typing import Any

from bankbatch.core.errors import IngestionError
from bankbatch.core.models import PipelineSettings, TransactionRecord
from bankbatch.observability.logger import get_logger

logger = get_logger(__name__)

COLUMN_PAYER_NAME = 2
COLUMN_PAYER_ACCOUNT = 3
COLUMN_AMOUNT = 4
COLUMN_RECEIVER_BIC = 6
COLUMN_BENEFICIARY_NAME = 7
COLUMN_BENEFICIARY_ACCOUNT = 8
COLUMN_REMITTANCE_INFORMATION = 9

REFERENCE_LENGTH = 9
_REFERENCE_ALPHABET = string.ascii_uppercase + string.digits


def generate_reference() -> str:
    """Random 9-character uppercase alphanumeric reference."""
    return "".join(secrets.choice(_REFERENCE_ALPHABET) for _ in range(REFERENCE_LENGTH))


def format_value_date(day: date) -> str:
    return day.strftime("%Y%m%d")


def cell_text(value: Any) -> str:
    """
    Render a spreadsheet cell as text.

    Integral floats lose their ".0" so amounts and account numbers read back
    the way they were typed.
    """
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _cell(row: Sequence[Any], column: int) -> str:
    return cell_text(row[column]) if column < len(row) else ""


def is_empty_row(row: Sequence[Any]) -> bool:
    return all(cell is None or cell == "" for cell in row)


def row_to_record(
    row: Sequence[Any],
    record_id: str,
    settings: PipelineSettings | None = None,
    today: date | None = None,
) -> TransactionRecord:
    """
    Build a record from one data row.

    Args:
        row: Cell values, 0-indexed
        record_id: Identifier to assign
        settings: Pipeline constants (defaults apply if None)
        today: Value date override

    Returns:
        New, not yet validated record
    """
    settings = settings or PipelineSettings()
    return TransactionRecord(
        id=record_id,
        reference=generate_reference(),
        value_date=format_value_date(today or date.today()),
        payer_name=_cell(row, COLUMN_PAYER_NAME),
        payer_account=_cell(row, COLUMN_PAYER_ACCOUNT),
        amount=_cell(row, COLUMN_AMOUNT),
        currency=settings.currency,
        receiver_bic=_cell(row, COLUMN_RECEIVER_BIC),
        beneficiary_name=_cell(row, COLUMN_BENEFICIARY_NAME),
        beneficiary_account=_cell(row, COLUMN_BENEFICIARY_ACCOUNT),
        remittance_information=_cell(row, COLUMN_REMITTANCE_INFORMATION),
        details_of_charges=settings.details_of_charges,
    )


def read_rows(
    rows: Sequence[Sequence[Any]],
    settings: PipelineSettings | None = None,
    id_prefix: str = "row",
    today: date | None = None,
) -> list[TransactionRecord]:
    """
    Convert one sheet's rows into records.

    The header row is skipped and fully empty rows are dropped; remaining
    rows get ids ``<id_prefix>-0``, ``<id_prefix>-1``, ...

    Args:
        rows: All rows of the sheet, header first
        settings: Pipeline constants
        id_prefix: Prefix for assigned ids
        today: Value date override

    Returns:
        Records in row order
    """
    data_rows = [row for row in rows[1:] if not is_empty_row(row)]
    return [
        row_to_record(row, f"{id_prefix}-{index}", settings, today)
        for index, row in enumerate(data_rows)
    ]


def merge_sources(
    sources: Sequence[Sequence[Sequence[Any]]],
    settings: PipelineSettings | None = None,
    today: date | None = None,
) -> list[TransactionRecord]:
    """
    Read several sheets and merge them into one record set.

    Ids are reassigned as ``combined-row-<n>`` across the merged set so they
    stay unique.

    Args:
        sources: One row list per source sheet, in processing order
        settings: Pipeline constants
        today: Value date override

    Returns:
        Merged records

    Raises:
        IngestionError: If no sources are given
    """
    if not sources:
        raise IngestionError("No valid files provided for processing")

    merged: list[TransactionRecord] = []
    for position, rows in enumerate(sources, start=1):
        if rows is None:
            raise IngestionError(f"Invalid source at position {position}")
        records = read_rows(rows, settings, today=today)
        logger.debug(f"Source {position}: {len(records)} records")
        merged.extend(records)

    return [
        record.model_copy(update={"id": f"combined-row-{index}"})
        for index, record in enumerate(merged)
    ]
