"""
Integration tests for pipeline failure handling
"""

import httpx
import pytest
from sqlalchemy import select, func, inspect
from ingestion.extractors.http_fetcher import ResourceFetcher
from ingestion.loaders.sql_loader import SQLLoader
from ingestion.runner import PipelineRunner
from models.base import PipelineState
from models.records import Customer, Organization
from core.exceptions import (
    ExtractError,
    FetchError,
    LoadError,
    ParseError,
    PipelineError,
    SchemaError,
)
from tests.factories import (
    CUSTOMER_ROWS,
    ORGANIZATION_ROWS,
    archive_transport,
    customers_csv,
    default_dump,
    make_tar_gz,
    organizations_csv,
)


def runner_for(config, payload: bytes, status_code: int = 200):
    fetcher = ResourceFetcher(transport=archive_transport(payload, status_code=status_code))
    return PipelineRunner(config, fetcher=fetcher)


async def table_names(engine):
    async with engine.connect() as conn:
        return await conn.run_sync(lambda sync_conn: set(inspect(sync_conn).get_table_names()))


async def count_rows(engine, model) -> int:
    async with engine.connect() as conn:
        return (await conn.execute(select(func.count()).select_from(model))).scalar()


@pytest.mark.asyncio
async def test_fetch_failure_stops_run_and_leaves_no_archive(pipeline_config, test_engine):
    config = pipeline_config()
    runner = runner_for(config, b"Service Unavailable", status_code=503)

    with pytest.raises(PipelineError) as exc_info:
        await runner.run()

    assert exc_info.value.stage == "fetch"
    assert isinstance(exc_info.value.__cause__, FetchError)
    assert exc_info.value.context["status_code"] == 503
    assert not config.archive_path.exists()
    assert not ResourceFetcher.partial_path(config.archive_path).exists()

    assert runner.state == PipelineState.FAILED
    assert runner.history == [PipelineState.IDLE, PipelineState.STAGED, PipelineState.FAILED]
    assert runner.error is exc_info.value
    # No later stage ran
    assert await table_names(test_engine) == set()


@pytest.mark.asyncio
async def test_unreachable_host(pipeline_config):
    config = pipeline_config()

    def handler(request):
        raise httpx.ConnectError("name or service not known", request=request)

    runner = PipelineRunner(config, fetcher=ResourceFetcher(transport=httpx.MockTransport(handler)))

    with pytest.raises(PipelineError) as exc_info:
        await runner.run()

    assert exc_info.value.stage == "fetch"
    assert not config.archive_path.exists()


@pytest.mark.asyncio
async def test_missing_source_url(pipeline_config):
    runner = PipelineRunner(pipeline_config(source_url=None))

    with pytest.raises(PipelineError) as exc_info:
        await runner.run()

    assert exc_info.value.stage == "fetch"
    assert isinstance(exc_info.value.__cause__, FetchError)


@pytest.mark.asyncio
async def test_corrupt_archive_fails_extract_stage(pipeline_config, test_engine):
    runner = runner_for(pipeline_config(), b"<html>definitely not a tarball</html>")

    with pytest.raises(PipelineError) as exc_info:
        await runner.run()

    assert exc_info.value.stage == "extract"
    assert isinstance(exc_info.value.__cause__, ExtractError)
    assert PipelineState.SCHEMA_READY not in runner.history
    assert await table_names(test_engine) == set()


@pytest.mark.asyncio
async def test_missing_organizations_file_keeps_customers(pipeline_config, test_engine):
    """
    The archive lacks the organizations file: the run fails naming the
    missing path, and the customers load that already ran is untouched.
    """
    config = pipeline_config()
    runner = runner_for(config, make_tar_gz({"dump/customers.csv": customers_csv()}))

    with pytest.raises(PipelineError) as exc_info:
        await runner.run()

    expected_path = config.extract_dir / "dump" / "organizations.csv"
    error = exc_info.value
    assert isinstance(error.__cause__, ExtractError)
    assert error.context["missing_path"] == expected_path
    assert str(expected_path) in str(error)

    assert runner.loaded_counts == {"customers": 3}
    assert await count_rows(test_engine, Customer) == 3
    assert await count_rows(test_engine, Organization) == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("table,files", [
    (
        "customers",
        {
            "dump/customers.csv": customers_csv(
                [CUSTOMER_ROWS[0], CUSTOMER_ROWS[1].rsplit(",", 1)[0], CUSTOMER_ROWS[2]]
            ),
            "dump/organizations.csv": organizations_csv(),
        },
    ),
    (
        "organizations",
        {
            "dump/customers.csv": customers_csv(),
            "dump/organizations.csv": organizations_csv(
                [ORGANIZATION_ROWS[0], ORGANIZATION_ROWS[1].rsplit(",", 1)[0], ORGANIZATION_ROWS[2]]
            ),
        },
    ),
])
async def test_row_missing_a_column_fails_the_load(pipeline_config, table, files):
    """Same fail-fast policy for both record types"""
    runner = runner_for(pipeline_config(), make_tar_gz(files))

    with pytest.raises(PipelineError) as exc_info:
        await runner.run()

    cause = exc_info.value.__cause__
    assert exc_info.value.stage == "load"
    assert isinstance(cause, ParseError)
    assert cause.context["table_name"] == table
    assert cause.row_number == 2
    assert table not in runner.loaded_counts


@pytest.mark.asyncio
async def test_store_unreachable_fails_schema_stage(pipeline_config):
    config = pipeline_config()
    runner = runner_for(config, make_tar_gz(default_dump()))

    # A directory where the store file should be makes it unopenable
    config.store_path.mkdir(parents=True)

    with pytest.raises(PipelineError) as exc_info:
        await runner.run()

    assert exc_info.value.stage == "schema"
    assert isinstance(exc_info.value.__cause__, SchemaError)
    assert runner.loaded_counts == {}


@pytest.mark.asyncio
async def test_batch_insert_failure_is_load_error(pipeline_config, monkeypatch):
    runner = runner_for(pipeline_config(), make_tar_gz(default_dump()))

    async def failing_load(self, source, rows):
        raise LoadError("Simulated DB failure during load", context={"table_name": source.table_name})

    monkeypatch.setattr(SQLLoader, "load", failing_load)

    with pytest.raises(PipelineError) as exc_info:
        await runner.run()

    assert exc_info.value.stage == "load"
    assert isinstance(exc_info.value.__cause__, LoadError)


@pytest.mark.asyncio
async def test_runner_runs_only_once(pipeline_config):
    runner = runner_for(pipeline_config(), make_tar_gz(default_dump()))
    await runner.run()

    with pytest.raises(RuntimeError):
        await runner.run()
