"""
Load typed rows into the destination store in fixed-size batches
"""

from itertools import batched
from typing import Any, Dict, Iterable, List
from sqlalchemy import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker
from ingestion.base import RecordSource
from core.exceptions import LoadError
import logging

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 100


class SQLLoader:
    """
    Insert rows into a record table, one transaction per batch.

    Ensures:
    - At most batch_size rows per INSERT/transaction
    - Rows are pulled from the input lazily, one batch at a time
    - Batches committed before a failure stay committed
    """

    def __init__(self, session_factory: async_sessionmaker, batch_size: int = DEFAULT_BATCH_SIZE):
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.session_factory = session_factory
        self.batch_size = batch_size

    async def load(self, source: RecordSource, rows: Iterable[Dict[str, Any]]) -> int:
        """
        Load rows into the source's table.

        Args:
            source: Record source naming the destination table
            rows: Typed rows keyed by ORM attribute names (may be lazy)

        Returns:
            Number of rows inserted
        """
        total_loaded = 0

        for batch_number, batch in enumerate(batched(rows, self.batch_size), start=1):
            count = await self.load_batch(
                source,
                list(batch),
                batch_number=batch_number,
                first_row_number=total_loaded + 1
            )
            total_loaded += count

            logger.debug(f"Batch {batch_number}: Loaded {count} rows into {source.table_name}")

        logger.info(f"Loaded {total_loaded} rows into {source.table_name} table")
        return total_loaded

    async def load_batch(
        self,
        source: RecordSource,
        batch: List[Dict[str, Any]],
        batch_number: int = 1,
        first_row_number: int = 1
    ) -> int:
        """Insert one batch in its own transaction"""
        if not batch:
            return 0

        try:
            async with self.session_factory() as session:
                async with session.begin():
                    await session.execute(insert(source.model), batch)
        except SQLAlchemyError as e:
            raise LoadError(
                f"Failed to insert batch {batch_number} into {source.table_name}",
                context={
                    "table_name": source.table_name,
                    "batch_number": batch_number,
                    "batch_size": len(batch),
                    "first_row_number": first_row_number,
                    "operation": "INSERT"
                },
                original_exception=e
            )

        return len(batch)
