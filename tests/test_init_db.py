import pytest
from sqlalchemy import func, inspect, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from civicpulse.core.config import settings
from civicpulse.core.security import verify_password
from civicpulse.db.init_db import create_initial_data, init_db
from civicpulse.models import User, UserRole

pytestmark = pytest.mark.anyio


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'init.db'}")
    yield engine
    await engine.dispose()


async def test_init_db_creates_every_table(engine):
    await init_db(engine)

    async with engine.connect() as conn:
        tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())

    assert {"user", "civicreport", "vote", "publicfacility", "workerlocation"} <= set(tables)


async def test_first_admin_is_created_once(engine):
    await init_db(engine)
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:
        await create_initial_data(session)
        await create_initial_data(session)

    async with session_factory() as session:
        count = await session.scalar(select(func.count(User.id)))
        admin = (await session.execute(select(User))).scalars().one()

    assert count == 1
    assert admin.email == settings.FIRST_ADMIN_EMAIL
    assert admin.role == UserRole.ADMIN
    assert verify_password(settings.FIRST_ADMIN_PASSWORD, admin.hashed_password)
