"""
Batch workflow: ingestion, review session and export.
"""

from .pipeline import RecordPipeline
from .readers import CSVRowReader, merge_sources, read_rows, row_to_record
from .writers import CSVExportWriter, build_export_filename, build_export_tables

__all__ = [
    "RecordPipeline",
    "CSVRowReader",
    "read_rows",
    "row_to_record",
    "merge_sources",
    "CSVExportWriter",
    "build_export_tables",
    "build_export_filename",
]
