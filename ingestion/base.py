"""
Record source definitions: which extracted file feeds which table
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple, Type
from models.base import Base, RecordType
from models.records import Customer, Organization
from schemas.records import RecordRow, CustomerRow, OrganizationRow
from core.config import PipelineConfig


@dataclass(frozen=True)
class RecordSource:
    """
    One tabular file in the extracted tree and the table it loads into.

    Attributes:
        record_type: Which of the two record types this file holds
        relative_path: Location of the file under the extracted root
        model: ORM model of the destination table
        schema: Row schema; its aliases are the expected header columns
    """

    record_type: RecordType
    relative_path: str
    model: Type[Base]
    schema: Type[RecordRow]

    @property
    def table_name(self) -> str:
        return self.model.__tablename__

    @property
    def expected_columns(self) -> List[str]:
        return self.schema.expected_columns()

    def resolve(self, root: Path) -> Path:
        """Absolute location of the file under an extracted root"""
        return Path(root) / self.relative_path


def customer_source(relative_path: str = "dump/customers.csv") -> RecordSource:
    return RecordSource(
        record_type=RecordType.CUSTOMER,
        relative_path=relative_path,
        model=Customer,
        schema=CustomerRow,
    )


def organization_source(relative_path: str = "dump/organizations.csv") -> RecordSource:
    return RecordSource(
        record_type=RecordType.ORGANIZATION,
        relative_path=relative_path,
        model=Organization,
        schema=OrganizationRow,
    )


def default_sources(config: PipelineConfig) -> Tuple[RecordSource, ...]:
    """Sources in load order: customers first, then organizations"""
    return (
        customer_source(config.customers_csv_path),
        organization_source(config.organizations_csv_path),
    )


RECORD_MODELS = (Customer, Organization)

RECORD_TYPES = {
    Customer.__tablename__: RecordType.CUSTOMER,
    Organization.__tablename__: RecordType.ORGANIZATION,
}
