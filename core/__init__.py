"""
Core utilities and configuration for the dump ingestion pipeline.

This package provides foundational components used throughout the pipeline:

Modules:
    config: Application settings and the explicit per-run PipelineConfig
    database: Async engine and session management for the destination store
    exceptions: Error kinds for each pipeline stage
    logging: Logging configuration

Usage:
    from core.config import settings, PipelineConfig
    from core.database import create_engine, build_database_url
    from core.exceptions import FetchError, ParseError
    from core.logging import setup_logging

Example:
    # Initialize logging
    setup_logging()

    # Build a run configuration
    config = PipelineConfig.from_settings(settings)
"""

__all__ = [
    "settings",
    "PipelineConfig",
    "setup_logging",
    "build_database_url",
    "create_engine",
    "create_session_factory",
    "get_session",
    # Exceptions
    "ETLException",
    "FetchError",
    "ExtractError",
    "SchemaError",
    "ParseError",
    "LoadError",
    "PipelineError",
]
