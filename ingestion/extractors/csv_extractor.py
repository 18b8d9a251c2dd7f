"""
Streaming CSV reader for the extracted record files
"""

import re
import pandas as pd
from typing import Any, Dict, Iterator, List, Tuple
from pathlib import Path
from ingestion.base import RecordSource
from core.exceptions import ParseError
import logging

logger = logging.getLogger(__name__)

# Only an empty cell counts as missing; "NA", "null" etc. are kept verbatim
_READ_OPTIONS = {
    "dtype": str,
    "keep_default_na": False,
    "na_values": [""],
    "index_col": False,
    "encoding": "utf-8-sig",
    "encoding_errors": "replace",
}

# pandas tokenizer errors name the offending physical line; the header is line 1
_ERROR_LINE = re.compile(r"\bline (\d+)")

# Undecodable bytes are read as U+FFFD so the bad row can be located
_UNDECODABLE = "\ufffd"


class CSVRecordReader:
    """
    Read one record source's CSV file row by row.

    Supports:
    - Exact header check against the source's expected columns
    - Chunked reading, so memory stays bounded by chunk_size rows
    - Every value kept as the original string; typing happens in validation
    """

    def __init__(self, source: RecordSource, root: Path, chunk_size: int = 100):
        self.source = source
        self.file_path = source.resolve(root)
        self.chunk_size = chunk_size

    def _context(self, **extra) -> Dict[str, Any]:
        context = {"file_path": self.file_path, "table_name": self.source.table_name}
        context.update(extra)
        return context

    def header(self) -> List[str]:
        """Column names from the header line only"""
        try:
            frame = pd.read_csv(self.file_path, nrows=0, **_READ_OPTIONS)
        except FileNotFoundError as e:
            raise ParseError(
                f"CSV file not found: {self.file_path}",
                context=self._context(),
                original_exception=e
            )
        except pd.errors.EmptyDataError as e:
            raise ParseError(
                "CSV file has no header row",
                context=self._context(row_number=0),
                original_exception=e
            )
        except (pd.errors.ParserError, OSError) as e:
            raise ParseError(
                "Unreadable CSV header",
                context=self._context(row_number=0),
                original_exception=e
            )
        return [str(column) for column in frame.columns]

    def validate_header(self) -> List[str]:
        """
        Check the header names exactly (case- and spelling-sensitive).

        Raises:
            ParseError: If expected columns are missing or unknown ones present
        """
        columns = self.header()
        expected = self.source.expected_columns

        missing = [c for c in expected if c not in columns]
        unexpected = [c for c in columns if c not in expected]

        if missing or unexpected:
            raise ParseError(
                f"Header mismatch in {self.file_path.name}",
                context=self._context(
                    row_number=0,
                    missing_columns=missing,
                    unexpected_columns=unexpected
                )
            )
        return columns

    def _bad_line_row(self, error: pd.errors.ParserError, rows_read: int) -> int:
        """1-based data row a tokenizer error refers to"""
        match = _ERROR_LINE.search(str(error))
        if match:
            return int(match.group(1)) - 1
        # No line in the message: the failing chunk starts after the last row read
        return rows_read + 1

    def _check_encoding(self, row_number: int, record: Dict[str, Any]) -> None:
        for field, value in record.items():
            if isinstance(value, str) and _UNDECODABLE in value:
                raise ParseError(
                    f"Invalid UTF-8 in row {row_number} of {self.file_path.name}",
                    context=self._context(row_number=row_number, field=field, value=value)
                )

    def iter_rows(self) -> Iterator[Tuple[int, Dict[str, Any]]]:
        """
        Lazily yield (row_number, row) for every data row.

        row_number is 1-based and excludes the header. Empty or absent
        cells come through as None. The iterator reads the file once and
        cannot be restarted.

        Raises:
            ParseError: On a row with too many fields or undecodable bytes,
                naming that row
        """
        logger.info(f"Reading CSV from {self.file_path}")

        row_number = 0
        try:
            with pd.read_csv(self.file_path, chunksize=self.chunk_size, **_READ_OPTIONS) as reader:
                for chunk in reader:
                    chunk = chunk.astype(object).where(chunk.notna(), None)
                    for record in chunk.to_dict(orient="records"):
                        row_number += 1
                        self._check_encoding(row_number, record)
                        yield row_number, record

        except FileNotFoundError as e:
            raise ParseError(
                f"CSV file not found: {self.file_path}",
                context=self._context(),
                original_exception=e
            )
        except pd.errors.EmptyDataError as e:
            raise ParseError(
                "CSV file has no header row",
                context=self._context(row_number=0),
                original_exception=e
            )
        except pd.errors.ParserError as e:
            bad_row = self._bad_line_row(e, row_number)
            raise ParseError(
                f"Malformed CSV at row {bad_row} of {self.file_path.name}",
                context=self._context(row_number=bad_row),
                original_exception=e
            )

        logger.info(f"Read {row_number} rows from {self.file_path.name}")
