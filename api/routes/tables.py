"""
Helpers shared by the status routes: which record tables exist
"""

from typing import Set
from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncSession


async def existing_table_names(db: AsyncSession) -> Set[str]:
    """Names of all tables present in the store"""
    return await db.run_sync(
        lambda session: set(inspect(session.connection()).get_table_names())
    )
