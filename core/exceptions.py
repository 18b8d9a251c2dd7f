"""
Custom exceptions for the ingestion pipeline with structured error context.

Each pipeline stage raises its own error kind, carrying enough context
(URL, file path, row number, table name) to tell which stage failed and
why. The orchestrator wraps whichever one surfaces into a single terminal
PipelineError.

Exception Hierarchy:
    ETLException (base)
    ├── FetchError
    ├── ExtractError
    ├── SchemaError
    ├── ParseError
    ├── LoadError
    └── PipelineError
"""

from typing import Optional, Dict, Any
from datetime import datetime, timezone


class ETLException(Exception):
    """
    Base exception for all pipeline errors.

    Attributes:
        message: Human-readable error message
        context: Additional context information (path, url, row, etc.)
        original_exception: The original exception that was caught (if any)
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        self.message = message
        self.context = dict(context or {})
        self.original_exception = original_exception
        self.timestamp = datetime.now(timezone.utc)

        super().__init__(message)
        if original_exception:
            self.__cause__ = original_exception

    def __str__(self) -> str:
        """Format error message with context."""
        base_msg = f"{self.__class__.__name__}: {self.message}"

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg += f" | Context: {context_str}"

        if self.original_exception:
            base_msg += f" | Caused by: {type(self.original_exception).__name__}: {str(self.original_exception)}"

        return base_msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": {k: str(v) for k, v in self.context.items()},
            "timestamp": self.timestamp.isoformat(),
            "original_error": str(self.original_exception) if self.original_exception else None
        }


class FetchError(ETLException):
    """
    Raised when the source archive cannot be downloaded.

    Context should include:
        - url: The source URL
        - destination: Local path the archive was being written to
        - status_code: HTTP status code (if a response was received)
    """
    pass


class ExtractError(ETLException):
    """
    Raised when the staged archive cannot be unpacked, or the unpacked
    tree lacks an expected file.

    Context should include:
        - archive_path / target_dir, or
        - missing_path: Expected file that is absent
    """
    pass


class SchemaError(ETLException):
    """
    Raised when the destination tables cannot be dropped or created.

    Context should include:
        - store: Store URL
        - tables: Tables being reset
    """
    pass


class ParseError(ETLException):
    """
    Raised when a tabular file cannot be parsed into valid rows.

    Context should include:
        - file_path: Path to the CSV file
        - row_number: 1-based data row (0 for the header)
        - field: Column that failed (if applicable)
        - value: Offending value (if applicable)
    """

    @property
    def row_number(self) -> Optional[int]:
        return self.context.get("row_number")

    @property
    def field(self) -> Optional[str]:
        return self.context.get("field")


class LoadError(ETLException):
    """
    Raised when a batch cannot be written to the destination store.

    Context should include:
        - table_name: Destination table
        - batch_number: 1-based batch index
        - first_row_number: Row number of the first row in the batch
    """
    pass


class PipelineError(ETLException):
    """
    Terminal error of a pipeline run.

    The stage attribute names the transition that failed; the component
    error that caused it is chained as __cause__.
    """

    def __init__(
        self,
        message: str,
        stage: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        context = dict(context or {})
        context["stage"] = stage
        super().__init__(message, context, original_exception)
        self.stage = stage
