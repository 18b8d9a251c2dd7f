"""
Pytest configuration and fixtures
"""

import pytest
import pytest_asyncio
from pathlib import Path
from typing import Callable, Dict
from core.config import PipelineConfig
from core.database import build_database_url, create_engine, create_session_factory
from tests.factories import ARCHIVE_URL


@pytest.fixture
def store_path(tmp_path) -> Path:
    """SQLite store file inside the test's temporary directory"""
    path = tmp_path / "out" / "database.sqlite"
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


@pytest_asyncio.fixture(scope="function")
async def test_engine(store_path):
    """Engine bound to a fresh temporary store"""
    engine = create_engine(build_database_url(store_path))
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return create_session_factory(test_engine)


@pytest.fixture
def pipeline_config(tmp_path, store_path) -> Callable[..., PipelineConfig]:
    """Factory for run configurations rooted in tmp_path"""

    def build(**overrides) -> PipelineConfig:
        values = {
            "source_url": ARCHIVE_URL,
            "staging_dir": tmp_path / "tmp",
            "store_path": store_path,
        }
        values.update(overrides)
        return PipelineConfig(**values)

    return build


@pytest.fixture
def extracted_root(tmp_path) -> Callable[[Dict[str, str]], Path]:
    """Write files as if extracted from an archive; returns the root"""

    def build(files: Dict[str, str]) -> Path:
        root = tmp_path / "extracted"
        for name, content in files.items():
            path = root / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return root

    return build
