"""
Script to run the dump ingestion pipeline once
"""

import argparse
import asyncio
import sys
import os
import logging

# Add current directory to path to allow imports from core, models, etc.
sys.path.append(os.getcwd())

from core.config import settings, PipelineConfig
from core.exceptions import PipelineError
from core.logging import setup_logging
from ingestion.runner import PipelineRunner

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fetch the data dump and load it into the store")
    parser.add_argument("--url", help="Archive URL (default: DUMP_DOWNLOAD_URL)")
    parser.add_argument("--store", help="SQLite store path (default: STORE_PATH)")
    parser.add_argument("--staging-dir", help="Staging directory (default: STAGING_DIR)")
    parser.add_argument("--log-level", help="Log level (default: LOG_LEVEL)")
    return parser.parse_args(argv)


async def run_pipeline(args: argparse.Namespace) -> int:
    """Run the pipeline; returns the process exit code"""
    config = PipelineConfig.from_settings(
        settings,
        source_url=args.url,
        store_path=args.store,
        staging_dir=args.staging_dir
    )
    runner = PipelineRunner(config)

    try:
        await runner.run()
    except PipelineError as e:
        logger.error(f"Ingestion failed at stage '{e.stage}': {e.__cause__}")
        return 1

    for table, count in runner.loaded_counts.items():
        logger.info(f"{table}: {count} rows")
    logger.info("✅ Done!")
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level)
    return asyncio.run(run_pipeline(args))


if __name__ == "__main__":
    sys.exit(main())
