"""
Lays out bank groups as export tables and writes them to disk.
"""

import csv
from collections.abc import Mapping, Sequence
from datetime import date
from pathlib import Path

from bankbatch.core.models import EXPORT_COLUMNS, ExportTable, PipelineSettings, TransactionRecord
from bankbatch.observability.logger import get_logger
from bankbatch.observability.metrics import export_records_total, increment_counter

logger = get_logger(__name__)

# Month names as used in the Iraqi/Levantine calendar, January first
ARABIC_MONTHS = (
    "كانون الثاني",
    "شباط",
    "آذار",
    "نيسان",
    "أيار",
    "حزيران",
    "تموز",
    "آب",
    "أيلول",
    "تشرين الأول",
    "تشرين الثاني",
    "كانون الأول",
)

_UNSAFE_FILENAME_CHARS = str.maketrans({"/": "-", "\\": "-"})


def build_export_filename(
    bank_name: str,
    when: date,
    title: str | None = None,
    extension: str = "csv",
) -> str:
    """
    Build the file name of one bank's export.

    Format: ``<title> <bank name> <Arabic month> <year>.<extension>``

    Args:
        bank_name: Bank group name
        when: Date whose month and year are used
        title: Leading title (defaults to the deployment title)
        extension: File extension without the dot

    Returns:
        File name safe to join onto an output directory
    """
    title = PipelineSettings().export_title if title is None else title
    parts = [title, bank_name, ARABIC_MONTHS[when.month - 1], str(when.year)]
    stem = " ".join(part for part in parts if part)
    return f"{stem.translate(_UNSAFE_FILENAME_CHARS)}.{extension}"


def build_export_tables(
    groups: Mapping[str, Sequence[TransactionRecord]],
    when: date | None = None,
    settings: PipelineSettings | None = None,
    extension: str = "csv",
) -> list[ExportTable]:
    """
    Lay out every bank group as an export table.

    Args:
        groups: Bank name -> records, as returned by group_by_bank
        when: Export date (defaults to today)
        settings: Pipeline constants (export title)
        extension: File extension for the suggested file names

    Returns:
        One table per group, in group order
    """
    when = when or date.today()
    settings = settings or PipelineSettings()
    return [
        ExportTable(
            bank_name=bank_name,
            filename=build_export_filename(bank_name, when, settings.export_title, extension),
            header=EXPORT_COLUMNS,
            rows=[record.to_export_row() for record in records],
        )
        for bank_name, records in groups.items()
    ]


class CSVExportWriter:
    """
    Writes export tables as CSV files, one file per bank.
    """

    def __init__(self, output_dir: str | Path, encoding: str = "utf-8-sig"):
        """
        Initialize writer.

        Args:
            output_dir: Directory for the exported files (created if missing)
            encoding: File encoding; the BOM lets spreadsheet tools detect UTF-8
        """
        self.output_dir = Path(output_dir)
        self.encoding = encoding

    def write(self, table: ExportTable) -> Path:
        """
        Write one export table.

        Args:
            table: Table to write

        Returns:
            Path of the written file
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.output_dir / table.filename

        with open(path, "w", newline="", encoding=self.encoding) as f:
            writer = csv.writer(f)
            writer.writerow(table.header)
            writer.writerows(table.rows)

        increment_counter(export_records_total, table.record_count, bank=table.bank_name)
        logger.info(f"Exported {table.record_count} records for {table.bank_name} to {path}")
        return path

    def write_all(self, tables: Sequence[ExportTable]) -> list[Path]:
        return [self.write(table) for table in tables]
