from sqlalchemy.orm import declarative_base
import enum

Base = declarative_base()


# ============================================================================
# ENUMS
# ============================================================================

class RecordType(str, enum.Enum):
    """Record types ingested from the dump"""
    CUSTOMER = "customer"
    ORGANIZATION = "organization"


class PipelineState(str, enum.Enum):
    """Pipeline run states, in the order a successful run reaches them"""
    IDLE = "idle"
    STAGED = "staged"
    FETCHED = "fetched"
    EXTRACTED = "extracted"
    SCHEMA_READY = "schema_ready"
    LOADED = "loaded"
    DONE = "done"
    FAILED = "failed"
