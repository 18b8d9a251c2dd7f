"""
Unit tests for the batched SQL loader and the record loader
"""

import pytest
from datetime import date
from unittest.mock import Mock, patch
from sqlalchemy import select, func
from ingestion.base import customer_source, organization_source
from ingestion.loaders.sql_loader import SQLLoader
from ingestion.loaders.record_loader import RecordLoader
from ingestion.schema_manager import SchemaManager
from models.records import Customer, Organization
from core.exceptions import LoadError, ParseError
from tests.factories import CUSTOMER_ROWS, CUSTOMERS_HEADER, customers_csv, organizations_csv


def typed_customer(n: int) -> dict:
    return {
        "index": n,
        "customer_id": f"CUST{n:011d}",
        "first_name": "Test",
        "last_name": f"Customer {n}",
        "company": "Example Co",
        "city": "Springfield",
        "country": "Chile",
        "phone_1": "555-0100",
        "phone_2": "555-0101",
        "email": f"customer{n}@example.com",
        "subscription_date": date(2021, 1, n % 28 + 1),
        "website": "https://example.com/",
    }


async def count_rows(session_factory, model) -> int:
    async with session_factory() as session:
        result = await session.execute(select(func.count()).select_from(model))
        return result.scalar()


class TestSQLLoader:
    """Test batched inserts"""

    @pytest.mark.asyncio
    async def test_load_in_fixed_size_batches(self, test_engine, session_factory):
        await SchemaManager(test_engine).reset()
        loader = SQLLoader(session_factory, batch_size=2)

        with patch.object(loader, "load_batch", wraps=loader.load_batch) as spy:
            loaded = await loader.load(customer_source(), (typed_customer(n) for n in range(1, 6)))

        assert loaded == 5
        assert [len(call.args[1]) for call in spy.call_args_list] == [2, 2, 1]
        assert [call.kwargs["first_row_number"] for call in spy.call_args_list] == [1, 3, 5]
        assert await count_rows(session_factory, Customer) == 5

    @pytest.mark.asyncio
    async def test_load_empty_input(self):
        session_factory = Mock()
        loader = SQLLoader(session_factory)

        result = await loader.load(customer_source(), iter([]))

        assert result == 0
        session_factory.assert_not_called()

    @pytest.mark.asyncio
    async def test_store_failure_raises_load_error(self, session_factory):
        # No schema reset: the table does not exist
        loader = SQLLoader(session_factory, batch_size=10)

        with pytest.raises(LoadError) as exc_info:
            await loader.load(customer_source(), [typed_customer(1)])

        assert exc_info.value.context["table_name"] == "customers"
        assert exc_info.value.context["batch_number"] == 1

    def test_batch_size_must_be_positive(self):
        with pytest.raises(ValueError):
            SQLLoader(Mock(), batch_size=0)


class TestRecordLoader:
    """Test CSV file -> table loading"""

    @pytest.mark.asyncio
    async def test_loads_both_record_types(self, test_engine, session_factory, extracted_root):
        root = extracted_root({
            "dump/customers.csv": customers_csv(),
            "dump/organizations.csv": organizations_csv(),
        })
        await SchemaManager(test_engine).reset()
        loader = RecordLoader(session_factory)

        assert await loader.load(customer_source(), root) == 3
        assert await loader.load(organization_source(), root) == 3

        async with session_factory() as session:
            orgs = (await session.execute(select(Organization).order_by(Organization.index))).scalars().all()

        assert orgs[1].name == "Mckinney, Riley and Day"
        assert orgs[1].number_of_employees == 4952

    @pytest.mark.asyncio
    async def test_header_only_file_loads_nothing(self, test_engine, session_factory, extracted_root):
        root = extracted_root({"dump/customers.csv": CUSTOMERS_HEADER + "\n"})
        await SchemaManager(test_engine).reset()

        assert await RecordLoader(session_factory).load(customer_source(), root) == 0
        assert await count_rows(session_factory, Customer) == 0

    @pytest.mark.asyncio
    async def test_header_mismatch_loads_nothing(self, test_engine, session_factory, extracted_root):
        header = CUSTOMERS_HEADER.replace("Email", "E-mail")
        root = extracted_root({"dump/customers.csv": "\n".join([header, *CUSTOMER_ROWS])})
        await SchemaManager(test_engine).reset()

        with pytest.raises(ParseError):
            await RecordLoader(session_factory).load(customer_source(), root)

        assert await count_rows(session_factory, Customer) == 0

    @pytest.mark.asyncio
    async def test_malformed_row_stops_load_after_committed_batches(
        self, test_engine, session_factory, extracted_root
    ):
        rows = list(CUSTOMER_ROWS)
        rows[2] = rows[2].replace("2020-03-25", "not-a-date")
        root = extracted_root({"dump/customers.csv": customers_csv(rows)})
        await SchemaManager(test_engine).reset()

        with pytest.raises(ParseError) as exc_info:
            await RecordLoader(session_factory, batch_size=2).load(customer_source(), root)

        assert exc_info.value.row_number == 3
        assert exc_info.value.field == "Subscription Date"
        # The first full batch was committed before the bad row was read
        assert await count_rows(session_factory, Customer) == 2
