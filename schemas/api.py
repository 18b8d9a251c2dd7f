"""
Pydantic schemas for API request/response models
"""

from pydantic import BaseModel, Field, model_validator
from typing import Optional, List
from datetime import datetime, timezone


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ============================================================================
# Health Check Schemas
# ============================================================================

class TableStatus(BaseModel):
    """Presence of one record table in the store"""
    table_name: str
    exists: bool


class HealthCheckResponse(BaseModel):
    """Health check response model"""
    status: str = Field("healthy", description="Overall system status: healthy, degraded, unhealthy")
    timestamp: datetime = Field(default_factory=_utcnow)
    request_id: Optional[str] = None
    database_connected: bool
    tables: List[TableStatus] = Field(default_factory=list)

    @model_validator(mode="after")
    def determine_status(self):
        """Determine overall health status"""
        if not self.database_connected:
            self.status = "unhealthy"
        elif not all(table.exists for table in self.tables):
            self.status = "degraded"
        else:
            self.status = "healthy"
        return self


# ============================================================================
# Statistics Schemas
# ============================================================================

class TableStatistics(BaseModel):
    """Row count for one record table; None when the table is absent"""
    table_name: str
    record_type: str
    row_count: Optional[int] = None


class StatsResponse(BaseModel):
    """Statistics response model"""
    request_id: str
    timestamp: datetime = Field(default_factory=_utcnow)
    total_rows: int = 0
    tables: List[TableStatistics] = Field(default_factory=list)
