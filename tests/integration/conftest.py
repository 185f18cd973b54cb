"""Integration-test fixtures: real PostgreSQL.

Needs a database migrated to head (`alembic upgrade head`, or
`alembic -x db_url=... upgrade head` for a separate test database).
TEST_DATABASE_URL overrides settings.DATABASE_URL. Every test is skipped when
the database is unreachable or not migrated.

Each test gets its own NullPool engine so no connection outlives its event loop.
Tables are truncated after every test (TRUNCATE bypasses the append-only triggers).
"""

import os
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from config.settings import settings

_TABLES = (
    "ledger_entries, redemptions, reward_items, survey_responses, checkins, "
    "event_rsvps, surveys, events, businesses"
)


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    url = os.environ.get("TEST_DATABASE_URL", settings.DATABASE_URL)
    engine = create_async_engine(url, poolclass=NullPool)
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1 FROM ledger_entries LIMIT 1"))
    except Exception as exc:  # refused, bad credentials or not migrated
        await engine.dispose()
        pytest.skip(f"PostgreSQL not available or not migrated: {exc}")

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    yield factory

    async with engine.begin() as conn:
        await conn.execute(text(f"TRUNCATE {_TABLES} RESTART IDENTITY CASCADE"))
    await engine.dispose()


@pytest_asyncio.fixture
async def seed(session_factory: async_sessionmaker[AsyncSession]):  # type: ignore[no-untyped-def]
    """Helpers that write committed fixture rows."""

    class _Seed:
        async def business(self, name: str = "Main St Bakery") -> int:
            return await self._scalar(
                "INSERT INTO businesses (name) VALUES (:name) RETURNING id", name=name
            )

        async def reward_item(
            self,
            point_threshold: int,
            *,
            max_redemptions: int | None = None,
            business_id: int | None = None,
        ) -> int:
            return await self._scalar(
                "INSERT INTO reward_items (name, point_threshold, max_redemptions, business_id) "
                "VALUES ('Free Coffee', :t, :m, :b) RETURNING id",
                t=point_threshold,
                m=max_redemptions,
                b=business_id,
            )

        async def credit(self, user_id: str, amount: int, ref: str) -> None:
            await self._scalar(
                "INSERT INTO ledger_entries (user_id, amount, source_kind, source_ref) "
                "VALUES (:u, :a, 'SURVEY', :r) RETURNING id",
                u=user_id,
                a=amount,
                r=ref,
            )

        async def _scalar(self, sql: str, **params: object) -> int:
            async with session_factory() as db:
                value = (await db.execute(text(sql), params)).scalar_one()
                await db.commit()
                return int(value)

    return _Seed()
