"""Fixtures for identity integration tests.

The SQLAlchemy store runs against a throwaway SQLite file per test.
"""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from userhub_identity.infrastructure.persistence.sqlalchemy import (
    CredentialStoreSQLAlchemy,
    IdentityBase,
)


@pytest.fixture
async def engine(tmp_path):
    """Create an engine with the identity schema."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'userhub.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(IdentityBase.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def credential_store(session_maker):
    """Create the SQLAlchemy credential store."""
    return CredentialStoreSQLAlchemy(session_maker)
