"""Shared test fixtures."""

import pytest
import pytest_asyncio
from sqlalchemy import select
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from backend.auth.credentials import CredentialManager
from backend.auth.identity_store import IdentityStore
from backend.database import install_sqlite_pragmas
from backend.models.base import Base
from backend.models.user import User

# Lowest bcrypt cost keeps the suite fast; production defaults to 12.
TEST_ROUNDS = 4


@pytest.fixture
def credentials():
    return CredentialManager(rounds=TEST_ROUNDS)


@pytest_asyncio.fixture
async def session_factory():
    """Fresh in-memory SQLite database per test (shared via StaticPool)."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    install_sqlite_pragmas(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
def store(session_factory, credentials):
    return IdentityStore(db_session_factory=session_factory, credentials=credentials)


@pytest_asyncio.fixture
async def file_session_factory(tmp_path):
    """File-backed SQLite database with a real connection pool, for concurrent access."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'identity.db'}")
    install_sqlite_pragmas(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
def file_store(file_session_factory, credentials):
    return IdentityStore(db_session_factory=file_session_factory, credentials=credentials)


@pytest.fixture
def fetch_user_row(session_factory):
    """Read a raw User row (including password_hash) straight from the database."""
    async def _fetch(user_id):
        async with session_factory() as session:
            return (await session.execute(
                select(User).where(User.id == user_id)
            )).scalar_one_or_none()
    return _fetch


@pytest.fixture
def count_rows(session_factory):
    """Count rows in the users or staff_profiles table."""
    async def _count(model):
        async with session_factory() as session:
            return len((await session.execute(select(model))).scalars().all())
    return _count
