"""
Pipeline components for the full-replace dump ingestion.

This package contains every stage of the pipeline:

Modules:
    base: Record source definitions (file -> table -> row schema)
    schema_manager: Drops and recreates the record tables
    runner: Orchestrator that sequences the stages

Subpackages:
    extractors: HTTP fetcher, archive extractor, streaming CSV reader
    transformers: Row validation into typed rows
    loaders: Batched inserts and the per-source record loader

Architecture:
    Each run replaces the store's contents:

    1. Fetch - Stream the remote .tar.gz into the staging area
    2. Extract - Unpack it into the working tree
    3. Reset - Drop and recreate the customers and organizations tables
    4. Load - Stream each CSV file into its table in batches of 100 rows

    Stages run one after another; the first failure ends the run.

Usage:
    from core.config import PipelineConfig, settings
    from ingestion.runner import PipelineRunner

Example:
    config = PipelineConfig.from_settings(settings)
    runner = PipelineRunner(config)
    await runner.run()

    print(runner.loaded_counts)

Error Handling:
    Each stage raises its own error kind from core.exceptions
    (FetchError, ExtractError, SchemaError, ParseError, LoadError); the
    runner surfaces the first one as a PipelineError naming the stage.
"""

__all__ = [
    "RecordSource",
    "PipelineRunner",
    "ResourceFetcher",
    "ArchiveExtractor",
    "CSVRecordReader",
    "RecordValidator",
    "SQLLoader",
    "RecordLoader",
    "SchemaManager",
]
