"""
Record loader: stream one extracted CSV file into its table
"""

from pathlib import Path
from sqlalchemy.ext.asyncio import async_sessionmaker
from ingestion.base import RecordSource
from ingestion.extractors.csv_extractor import CSVRecordReader
from ingestion.transformers.record_validator import RecordValidator
from ingestion.loaders.sql_loader import SQLLoader, DEFAULT_BATCH_SIZE
import logging

logger = logging.getLogger(__name__)


class RecordLoader:
    """
    Wire reader -> validator -> batched insert for one record source.

    Rows are pulled through the chain on demand: the SQL loader asks
    for the next batch, which pulls validated rows, which pull raw rows
    from the CSV reader. Nothing holds more than one batch in memory.
    """

    def __init__(self, session_factory: async_sessionmaker, batch_size: int = DEFAULT_BATCH_SIZE):
        self.batch_size = batch_size
        self.sql_loader = SQLLoader(session_factory, batch_size=batch_size)

    async def load(self, source: RecordSource, root: Path) -> int:
        """
        Load the source's file under root into its table.

        Returns:
            Number of rows loaded

        Raises:
            ParseError: Header mismatch or first malformed row
            LoadError: Batch insert failure
        """
        reader = CSVRecordReader(source, root, chunk_size=self.batch_size)
        reader.validate_header()

        validator = RecordValidator(source, file_path=reader.file_path)
        rows = validator.validate_all(reader.iter_rows())

        logger.info(f"Loading {reader.file_path} into {source.table_name}")
        return await self.sql_loader.load(source, rows)
