"""SQLAlchemy async engine & session for the local SQLite record store."""

from __future__ import annotations

import logging
from pathlib import Path

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from dropzone.config import settings
from dropzone.models import Base

logger = logging.getLogger(__name__)


def _casefold(value):
    return value.casefold() if isinstance(value, str) else value


def _configure_sqlite(dbapi_conn, _connection_record):
    """Apply SQLite PRAGMAs and register SQL functions on each new connection."""
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA synchronous=NORMAL")
    cursor.execute("PRAGMA cache_size=-8000")  # 8 MB
    cursor.close()
    # SQLite's lower() only folds ASCII
    dbapi_conn.create_function("casefold", 1, _casefold)


def create_engine_for(database_url: str, **kwargs) -> AsyncEngine:
    """Build an async engine with the SQLite PRAGMAs and functions attached."""
    engine = create_async_engine(
        database_url,
        echo=settings.debug and settings.log_level == "DEBUG",
        **kwargs,
    )
    event.listen(engine.sync_engine, "connect", _configure_sqlite)
    return engine


db_path = Path(settings.database_path)

DATABASE_URL = f"sqlite+aiosqlite:///{db_path}"

engine = create_engine_for(DATABASE_URL)

async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_db(bind: AsyncEngine | None = None) -> None:
    """Create the record tables if they are missing."""
    bind = bind or engine
    if bind is engine:
        db_path.parent.mkdir(parents=True, exist_ok=True)
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Record tables created/verified at %s", bind.url)
