"""
Reset the destination store's record tables
"""

from typing import Dict, List, Sequence, Type
from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine
from models.base import Base
from ingestion.base import RECORD_MODELS
from core.database import mask_url
from core.exceptions import SchemaError
import logging

logger = logging.getLogger(__name__)


class SchemaManager:
    """
    Drop and recreate the record tables.

    Each run starts from empty tables: nothing loaded by a previous run
    survives a reset. Either both tables come out freshly created or
    SchemaError is raised before any load starts.
    """

    def __init__(self, engine: AsyncEngine, models: Sequence[Type[Base]] = RECORD_MODELS):
        self.engine = engine
        self.tables = [model.__table__ for model in models]

    def table_names(self) -> List[str]:
        return [table.name for table in self.tables]

    async def reset(self) -> None:
        """
        Drop each record table if present, then create it.

        Raises:
            SchemaError: If the store is unreachable or DDL fails
        """
        logger.info(f"Resetting tables: {', '.join(self.table_names())}")

        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.drop_all, tables=self.tables, checkfirst=True)
                await conn.run_sync(Base.metadata.create_all, tables=self.tables, checkfirst=False)
        except (SQLAlchemyError, OSError) as e:
            raise SchemaError(
                "Failed to reset destination tables",
                context={
                    "store": mask_url(str(self.engine.url)),
                    "tables": self.table_names()
                },
                original_exception=e
            )

        logger.info("Destination tables created")

    async def existing_tables(self) -> Dict[str, bool]:
        """Which record tables currently exist in the store"""
        try:
            async with self.engine.connect() as conn:
                present = await conn.run_sync(
                    lambda sync_conn: set(inspect(sync_conn).get_table_names())
                )
        except (SQLAlchemyError, OSError) as e:
            raise SchemaError(
                "Failed to inspect destination store",
                context={"store": mask_url(str(self.engine.url))},
                original_exception=e
            )
        return {name: name in present for name in self.table_names()}
