import os
import tempfile

# --- CONFIGURATION: MUST BE BEFORE IMPORTING THE APP ---
_db_dir = tempfile.mkdtemp()
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_db_dir}/test.db"

import pytest_asyncio
from datetime import date
from httpx import AsyncClient, ASGITransport

import dateplan.models  # noqa: F401
from dateplan.database import Base, engine, AsyncSessionLocal
from dateplan.main import app
from dateplan.services.couple_service import CoupleService
from dateplan.services.member_service import MemberService


@pytest_asyncio.fixture
async def setup_db():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    await engine.dispose()


@pytest_asyncio.fixture
async def db(setup_db):
    async with AsyncSessionLocal() as session:
        yield session


@pytest_asyncio.fixture
async def client(setup_db):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest_asyncio.fixture
async def members(db):
    """Three members: a and b are a couple, c is on their own."""
    member_service = MemberService(db)
    a = await member_service.create_member("홍길동", "gildong", date(1999, 10, 10))
    b = await member_service.create_member("성춘향", "chunhyang")
    c = await member_service.create_member("이몽룡", "mongryong")
    couple = await CoupleService(db).connect_couple(a.id, b.id, date(2020, 1, 10))
    return {"a": a, "b": b, "c": c, "couple": couple}


def member_headers(member) -> dict:
    return {"X-Member-Id": str(member.id)}
