"""
Health check endpoint with store connectivity and table status
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import text
from api.dependencies import get_db
from api.routes.tables import existing_table_names
from ingestion.base import RECORD_MODELS
from schemas.api import HealthCheckResponse, TableStatus
import logging

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthCheckResponse)
async def health_check(request: Request, db: AsyncSession = Depends(get_db)):
    """
    Health check endpoint.

    Returns:
    - Store connectivity status
    - Whether each record table exists
    """
    db_connected = False
    present = set()

    try:
        await db.execute(text("SELECT 1"))
        db_connected = True
        present = await existing_table_names(db)
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"Database connection failed: {str(e)}")

    tables = [
        TableStatus(table_name=model.__tablename__, exists=model.__tablename__ in present)
        for model in RECORD_MODELS
    ]

    return HealthCheckResponse(
        request_id=getattr(request.state, "request_id", None),
        database_connected=db_connected,
        tables=tables
    )
