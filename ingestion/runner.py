# ============================================================================
# File: ingestion/runner.py
# Description: Pipeline orchestrator for the full-replace dump ingestion
# ============================================================================
"""
Pipeline Runner - sequences fetch, extract, schema reset and record loads.

A run walks strictly forward through:

    idle -> staged -> fetched -> extracted -> schema_ready -> loaded -> done

Any failure moves the runner to the terminal "failed" state and raises a
single PipelineError naming the failing stage, chained to the component
error. Nothing is retried or rolled back: staging artifacts stay on disk
for inspection, and the store keeps whatever the last completed reset or
batch left in it.
"""

from pathlib import Path
from typing import Dict, Iterable, List, Optional
import logging

from core.config import PipelineConfig
from core.database import build_database_url, create_engine, create_session_factory
from core.exceptions import ETLException, ExtractError, FetchError, PipelineError
from ingestion.base import RecordSource, default_sources
from ingestion.extractors.archive_extractor import ArchiveExtractor
from ingestion.extractors.http_fetcher import ResourceFetcher
from ingestion.loaders.record_loader import RecordLoader
from ingestion.schema_manager import SchemaManager
from models.base import PipelineState

logger = logging.getLogger(__name__)

# Stage labels reported on failure
STAGE_STAGING = "staging"
STAGE_FETCH = "fetch"
STAGE_EXTRACT = "extract"
STAGE_SCHEMA = "schema"
STAGE_LOAD = "load"


class PipelineRunner:
    """
    Orchestrate one full-replace ingestion run.

    Responsibilities:
    - Prepare the staging directories and the store's directory
    - Fetch -> Extract -> Reset schema -> Load each record source, in order
    - Stop at the first failure and surface it as PipelineError
    - Track the state reached and per-table row counts

    A runner instance performs a single run.
    """

    def __init__(
        self,
        config: PipelineConfig,
        fetcher: Optional[ResourceFetcher] = None,
        extractor: Optional[ArchiveExtractor] = None,
        sources: Optional[Iterable[RecordSource]] = None
    ):
        self.config = config
        self.fetcher = fetcher or ResourceFetcher(
            timeout=config.fetch_timeout,
            require_https=config.require_https
        )
        self.extractor = extractor or ArchiveExtractor()
        self.sources = tuple(sources) if sources is not None else default_sources(config)

        self.state = PipelineState.IDLE
        self.history: List[PipelineState] = [PipelineState.IDLE]
        self.loaded_counts: Dict[str, int] = {}
        self.error: Optional[ETLException] = None

    def _advance(self, state: PipelineState) -> None:
        self.state = state
        self.history.append(state)
        logger.info(f"Pipeline state: {state.value}")

    def _prepare_directories(self) -> None:
        for directory in (
            self.config.staging_dir,
            self.config.extract_dir,
            Path(self.config.store_path).parent,
        ):
            directory.mkdir(parents=True, exist_ok=True)
            logger.debug(f"Directory '{directory}' is ready")

    def _require_file(self, source: RecordSource) -> Path:
        path = source.resolve(self.config.extract_dir)
        if not path.is_file():
            raise ExtractError(
                f"Expected file missing from archive: {path}",
                context={
                    "missing_path": path,
                    "table_name": source.table_name,
                    "archive_path": self.config.archive_path
                }
            )
        return path

    async def run(self) -> None:
        """
        Run the pipeline end to end.

        Returns:
            None once every stage, including both loads, has completed

        Raises:
            PipelineError: On the first failing stage; __cause__ is the
                component error (FetchError, ExtractError, SchemaError,
                ParseError or LoadError)
        """
        if self.state is not PipelineState.IDLE:
            raise RuntimeError(f"Pipeline runner already used (state: {self.state.value})")

        stage = STAGE_STAGING
        engine = None

        try:
            # --------------------------------------------------
            # PHASE 1: STAGING
            # --------------------------------------------------
            self._prepare_directories()
            self._advance(PipelineState.STAGED)

            # --------------------------------------------------
            # PHASE 2: FETCH
            # --------------------------------------------------
            stage = STAGE_FETCH
            if not self.config.source_url:
                raise FetchError(
                    "No source URL configured",
                    context={"destination": self.config.archive_path}
                )
            await self.fetcher.fetch(self.config.source_url, self.config.archive_path)
            self._advance(PipelineState.FETCHED)

            # --------------------------------------------------
            # PHASE 3: EXTRACT
            # --------------------------------------------------
            stage = STAGE_EXTRACT
            self.extractor.extract(self.config.archive_path, self.config.extract_dir)
            self._advance(PipelineState.EXTRACTED)

            # --------------------------------------------------
            # PHASE 4: SCHEMA RESET
            # --------------------------------------------------
            stage = STAGE_SCHEMA
            engine = create_engine(build_database_url(self.config.store_path))
            await SchemaManager(engine).reset()
            self._advance(PipelineState.SCHEMA_READY)

            # --------------------------------------------------
            # PHASE 5: LOAD EACH SOURCE
            # --------------------------------------------------
            loader = RecordLoader(
                create_session_factory(engine),
                batch_size=self.config.batch_size
            )
            for source in self.sources:
                stage = STAGE_EXTRACT
                self._require_file(source)

                stage = STAGE_LOAD
                count = await loader.load(source, self.config.extract_dir)
                self.loaded_counts[source.table_name] = count

            self._advance(PipelineState.LOADED)
            self._advance(PipelineState.DONE)

            logger.info(
                "Pipeline completed: "
                + ", ".join(f"{table}={count}" for table, count in self.loaded_counts.items())
            )

        except ETLException as e:
            self._fail(stage, e)

        except Exception as e:
            logger.exception(f"Unexpected error during {stage} stage")
            self._fail(stage, e)

        finally:
            if engine is not None:
                await engine.dispose()

    def _fail(self, stage: str, error: Exception) -> None:
        self.state = PipelineState.FAILED
        self.history.append(PipelineState.FAILED)

        message = error.message if isinstance(error, ETLException) else str(error)
        context = {"loaded_counts": dict(self.loaded_counts)}
        if isinstance(error, ETLException):
            context.update(error.context)

        self.error = PipelineError(
            f"Pipeline failed during {stage} stage: {message}",
            stage=stage,
            context=context,
            original_exception=error
        )

        logger.error(
            f"Pipeline failed during {stage} stage: {message}",
            extra={"error_context": self.error.to_dict()}
        )
        raise self.error
