"""
Source row readers.
"""

from .csv_reader import CSVRowReader
from .row_reader import merge_sources, read_rows, row_to_record

__all__ = [
    "CSVRowReader",
    "read_rows",
    "row_to_record",
    "merge_sources",
]
