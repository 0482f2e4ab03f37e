"""Shared fixtures: a throwaway SQLite database and site/check builders."""
from datetime import datetime
from typing import Optional

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from opsboard.database import Base
from opsboard.models import HealthCheck, Site


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'opsboard-test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def add_site(session_factory):
    async def _add_site(site_id: str, domain: str, name: Optional[str] = None, status: str = "production"):
        async with session_factory() as session:
            session.add(Site(id=site_id, domain=domain, name=name or site_id, status=status))
            await session.commit()
    return _add_site


@pytest.fixture
def add_check(session_factory):
    async def _add_check(site_id: str, status: str, checked_at: datetime, response_time_ms: int = 100, status_code: int = 200):
        async with session_factory() as session:
            session.add(HealthCheck(
                site_id=site_id,
                status=status,
                response_time_ms=response_time_ms,
                status_code=status_code,
                checked_at=checked_at,
            ))
            await session.commit()
    return _add_check


@pytest.fixture
def count_rows(session_factory):
    async def _count_rows(model) -> int:
        from sqlalchemy import func, select
        async with session_factory() as session:
            result = await session.execute(select(func.count()).select_from(model))
            return result.scalar_one()
    return _count_rows
