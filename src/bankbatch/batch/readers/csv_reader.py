"""
CSV reader producing raw sheet rows.

Stands in for the spreadsheet reader when sheets are exported as CSV.
"""

import csv
from pathlib import Path

from bankbatch.core.errors import IngestionError


class CSVRowReader:
    """
    Reads a CSV file into a list of raw rows (header included).
    """

    def __init__(self, delimiter: str = ",", encoding: str = "utf-8-sig"):
        """
        Initialize CSV reader.

        Args:
            delimiter: Field delimiter
            encoding: File encoding (utf-8-sig tolerates a byte order mark)
        """
        self.delimiter = delimiter
        self.encoding = encoding

    def read(self, file_path: str | Path) -> list[list[str]]:
        """
        Read a CSV file.

        Args:
            file_path: Path to CSV file

        Returns:
            Rows as lists of cell strings

        Raises:
            IngestionError: If the file cannot be read or parsed
        """
        path = Path(file_path)
        try:
            with open(path, newline="", encoding=self.encoding) as f:
                return [list(row) for row in csv.reader(f, delimiter=self.delimiter)]
        except (OSError, UnicodeDecodeError, csv.Error) as e:
            raise IngestionError(f"Failed to process file: {path.name}") from e
