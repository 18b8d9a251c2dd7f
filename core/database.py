"""
Database engine and session management with SQLAlchemy async
"""

from pathlib import Path
from typing import AsyncIterator, Optional, Union
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool
import logging

logger = logging.getLogger(__name__)

_engine: Optional[AsyncEngine] = None
_session_maker: Optional[async_sessionmaker] = None


def build_database_url(store_path: Union[str, Path]) -> str:
    """Async SQLite URL for a store file path"""
    return f"sqlite+aiosqlite:///{Path(store_path).as_posix()}"


def mask_url(url: str) -> str:
    """Render a database URL safe for logs"""
    return make_url(url).render_as_string(hide_password=True)


def create_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine; one per pipeline run"""
    logger.debug(f"Creating engine for {mask_url(database_url)}")
    return create_async_engine(
        database_url,
        echo=echo,
        poolclass=NullPool,  # One connection per unit of work, nothing kept open
        future=True
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """Create session factory bound to an engine"""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False
    )


def get_engine() -> AsyncEngine:
    """Engine for the configured store (lazy-loaded, used by the API)"""
    global _engine
    if _engine is None:
        from core.config import settings
        _engine = create_engine(
            build_database_url(settings.STORE_PATH),
            echo=settings.ENVIRONMENT == "development" and settings.LOG_LEVEL.upper() == "DEBUG"
        )
    return _engine


async def get_session() -> AsyncIterator[AsyncSession]:
    """Get database session"""
    global _session_maker
    if _session_maker is None:
        _session_maker = create_session_factory(get_engine())
    async with _session_maker() as session:
        yield session
