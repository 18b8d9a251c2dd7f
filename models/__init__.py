"""
SQLAlchemy ORM models for the destination store.

Models:
    base: Base declarative class and shared enums (RecordType, PipelineState)
    records: Customer and Organization tables, recreated on every run

Database Schema:
    Column names in the store are the CSV header names ("Customer Id",
    "Subscription Date", ...). ORM attributes use snake_case equivalents.
    Each table has an integer surrogate key "id" assigned by the store.

Usage:
    from models import Customer, Organization
    from models.base import RecordType, PipelineState
"""

from models.base import Base, RecordType, PipelineState
from models.records import Customer, Organization

__all__ = [
    "Base",
    "RecordType",
    "PipelineState",
    "Customer",
    "Organization",
]
