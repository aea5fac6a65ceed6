"""Database engine, session management, and table creation."""

import logging

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from .config import OrphanageConfig
from .models.base import Base

logger = logging.getLogger("orphanage.database")

_engine = None
_session_factory = None


def _configure_sqlite_connection(dbapi_connection, connection_record) -> None:
    """Hand transaction control to SQLAlchemy and turn on FK enforcement."""
    # pysqlite would otherwise defer BEGIN until the first INSERT/UPDATE/DELETE
    dbapi_connection.isolation_level = None
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _begin_immediate(conn) -> None:
    """Take the database write lock when the transaction starts.

    Guard checks then read a snapshot no concurrent writer can change
    before commit.
    """
    conn.exec_driver_sql("BEGIN IMMEDIATE")


def install_sqlite_pragmas(engine) -> None:
    """Register the SQLite connection hooks on an async engine (no-op for other dialects)."""
    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _configure_sqlite_connection)
        event.listen(engine.sync_engine, "begin", _begin_immediate)


def get_engine(config: OrphanageConfig):
    """Get or create the async database engine."""
    global _engine
    if _engine is None:
        _engine = create_async_engine(
            config.database_url,
            echo=config.debug,
            future=True,
            pool_pre_ping=True,
        )
        install_sqlite_pragmas(_engine)
    return _engine


def get_session_factory(config: OrphanageConfig) -> async_sessionmaker[AsyncSession]:
    """Get or create the async session factory."""
    global _session_factory
    if _session_factory is None:
        engine = get_engine(config)
        _session_factory = async_sessionmaker(engine, expire_on_commit=False)
    return _session_factory


async def create_tables(config: OrphanageConfig) -> None:
    """Create all database tables."""
    engine = get_engine(config)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured for %s", engine.dialect.name)


async def get_session(config: OrphanageConfig) -> AsyncSession:
    """Get a new async session."""
    factory = get_session_factory(config)
    async with factory() as session:
        yield session


async def close_engine() -> None:
    """Close the database engine."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_factory = None
