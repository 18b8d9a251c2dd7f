"""
Pydantic schemas for data validation and serialization.

Schemas:
    records: Row schemas for the customers and organizations CSV files
    api: Status API response models

Features:
    - Aliases matching the CSV header names exactly
    - Type coercion of integer and date columns
    - Required-field checking on every row

Usage:
    from schemas.records import CustomerRow, OrganizationRow
    from schemas.api import HealthCheckResponse, StatsResponse

Example:
    row = CustomerRow.model_validate({"Index": "1", "Customer Id": "DD37Cf93aecA6Dc", ...})
    assert row.index == 1
"""

__all__ = [
    "RecordRow",
    "CustomerRow",
    "OrganizationRow",
    "HealthCheckResponse",
    "StatsResponse",
]
