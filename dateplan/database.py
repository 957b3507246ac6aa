import logging

from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from dateplan.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

# Allow for "postgres://" to be replaced by "postgresql+asyncpg://" for async engine compatibility
database_url = settings.DATABASE_URL
if database_url and database_url.startswith("postgres://"):
    database_url = database_url.replace("postgres://", "postgresql+asyncpg://", 1)

engine = create_async_engine(database_url, echo=False)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)

Base = declarative_base()

async def get_db():
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def bulk_insert(db: AsyncSession, model, rows: list[dict]) -> None:
    """Insert rows in one executemany batch, keeping their order.

    Does not commit; the caller owns the transaction so a failed batch
    rolls back together with the pattern it belongs to.
    """
    if not rows:
        return
    await db.execute(insert(model), rows)
    logger.debug(f"Bulk inserted {len(rows)} rows into {model.__tablename__}")


async def init_db():
    # Import models so every table is registered on Base.metadata
    import dateplan.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
