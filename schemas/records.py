"""
Pydantic schemas for rows parsed from the dump's CSV files
"""

import re
from datetime import date
from typing import Any, Dict, List
from pydantic import BaseModel, Field, field_validator

# Integer columns hold plain digit strings; "1.0" or "1e3" is malformed
_WHOLE_NUMBER = re.compile(r"-?\d+")


class RecordRow(BaseModel):
    """
    Base schema for one parsed CSV row.

    Field aliases are the CSV header names; field names are the ORM
    attribute names, so a validated row dumps straight into an insert.
    Every field is required: a missing (None) value fails validation.
    """

    @classmethod
    def expected_columns(cls) -> List[str]:
        """Header names this schema expects, in declaration order"""
        return [field.alias or name for name, field in cls.model_fields.items()]

    def to_row(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=False)

    @staticmethod
    def whole_number(value: Any) -> Any:
        if isinstance(value, str) and not _WHOLE_NUMBER.fullmatch(value):
            raise ValueError("must be a whole number")
        return value

    class Config:
        populate_by_name = True
        extra = "forbid"


class CustomerRow(RecordRow):
    """Schema for a row of customers.csv"""

    index: int = Field(..., alias="Index")
    customer_id: str = Field(..., alias="Customer Id")
    first_name: str = Field(..., alias="First Name")
    last_name: str = Field(..., alias="Last Name")
    company: str = Field(..., alias="Company")
    city: str = Field(..., alias="City")
    country: str = Field(..., alias="Country")
    phone_1: str = Field(..., alias="Phone 1")
    phone_2: str = Field(..., alias="Phone 2")
    email: str = Field(..., alias="Email")
    subscription_date: date = Field(..., alias="Subscription Date")
    website: str = Field(..., alias="Website")

    @field_validator("index", mode="before")
    @classmethod
    def check_index(cls, v):
        return cls.whole_number(v)


class OrganizationRow(RecordRow):
    """Schema for a row of organizations.csv"""

    index: int = Field(..., alias="Index")
    organization_id: str = Field(..., alias="Organization Id")
    name: str = Field(..., alias="Name")
    website: str = Field(..., alias="Website")
    country: str = Field(..., alias="Country")
    description: str = Field(..., alias="Description")
    founded: int = Field(..., alias="Founded")
    industry: str = Field(..., alias="Industry")
    number_of_employees: int = Field(..., alias="Number of employees")

    @field_validator("index", "founded", "number_of_employees", mode="before")
    @classmethod
    def check_whole_numbers(cls, v):
        return cls.whole_number(v)
