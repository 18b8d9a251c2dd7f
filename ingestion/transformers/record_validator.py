"""
Turn raw CSV rows into typed rows with Pydantic validation
"""

from typing import Any, Dict, Iterable, Iterator, Optional, Tuple
from pathlib import Path
from pydantic import ValidationError as PydanticValidationError
from ingestion.base import RecordSource
from core.exceptions import ParseError
import logging

logger = logging.getLogger(__name__)


class RecordValidator:
    """
    Validate raw rows against a record source's schema.

    Handles:
    - Required-field checking (a missing or empty cell is an error)
    - Integer and date conversion
    - Mapping header names onto ORM attribute names

    The first invalid row raises ParseError; rows are never skipped.
    """

    def __init__(self, source: RecordSource, file_path: Optional[Path] = None):
        self.source = source
        self.file_path = file_path

    def validate(self, row_number: int, row: Dict[str, Any]) -> Dict[str, Any]:
        """
        Validate a single row.

        Returns:
            Dict keyed by ORM attribute names, ready for insert
        """
        try:
            return self.source.schema.model_validate(row).to_row()
        except PydanticValidationError as e:
            error = e.errors()[0]
            field = str(error["loc"][0]) if error.get("loc") else None
            value = row.get(field) if field else None

            raise ParseError(
                f"Invalid row {row_number} in {self.source.table_name}: "
                f"field '{field}' {error['msg'].lower()}",
                context={
                    "file_path": self.file_path,
                    "table_name": self.source.table_name,
                    "row_number": row_number,
                    "field": field,
                    "value": value,
                    "error_count": e.error_count()
                },
                original_exception=e
            )

    def validate_all(self, rows: Iterable[Tuple[int, Dict[str, Any]]]) -> Iterator[Dict[str, Any]]:
        """Lazily validate a stream of (row_number, row) pairs"""
        for row_number, row in rows:
            yield self.validate(row_number, row)
