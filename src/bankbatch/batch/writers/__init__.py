"""
Export writers for grouped records.
"""

from .export_writer import CSVExportWriter, build_export_filename, build_export_tables

__all__ = [
    "CSVExportWriter",
    "build_export_tables",
    "build_export_filename",
]
