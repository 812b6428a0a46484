# db.py
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    create_async_engine,
    async_sessionmaker,
)

from config import settings
from config.database import engine_options
from db_base import Base


# ---------- Engine & Session (async) ----------

engine = create_async_engine(
    settings.DATABASE_URL,  # e.g. postgresql+asyncpg://... or sqlite+aiosqlite:///...
    **engine_options(settings.DATABASE_URL, settings.DEBUG),
)


def make_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
        autocommit=False,
    )


AsyncSessionLocal = make_session_factory(engine)


# ---------- Schema helper ----------

async def init_db(bind: AsyncEngine | None = None) -> None:
    """
    Create every collection table from the ORM metadata.

    There is no migration tooling; tables are created if missing.
    """
    # Import collections so they are registered on Base.metadata
    import db_models  # noqa: F401

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

