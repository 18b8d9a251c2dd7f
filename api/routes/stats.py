"""
Record table statistics endpoint
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from api.dependencies import get_db
from api.routes.tables import existing_table_names
from ingestion.base import RECORD_MODELS, RECORD_TYPES
from schemas.api import StatsResponse, TableStatistics
import uuid
import logging

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Statistics"])


@router.get("/stats", response_model=StatsResponse)
async def get_stats(request: Request, db: AsyncSession = Depends(get_db)):
    """
    Get row counts for the record tables.

    A table that does not exist yet (no run completed its schema reset)
    is reported with row_count null.
    """
    request_id = getattr(request.state, "request_id", None) or f"req_{uuid.uuid4().hex[:12]}"

    logger.info(f"[{request_id}] GET /stats")

    present = await existing_table_names(db)

    tables = []
    total_rows = 0
    for model in RECORD_MODELS:
        row_count = None
        if model.__tablename__ in present:
            result = await db.execute(select(func.count()).select_from(model))
            row_count = result.scalar() or 0
            total_rows += row_count

        tables.append(TableStatistics(
            table_name=model.__tablename__,
            record_type=RECORD_TYPES[model.__tablename__].value,
            row_count=row_count
        ))

    logger.info(f"[{request_id}] Stats: {total_rows} rows across {len(tables)} tables")

    return StatsResponse(
        request_id=request_id,
        total_rows=total_rows,
        tables=tables
    )
