from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base
from typing import AsyncGenerator

from globetrotter.config.settings import settings


def _engine_kwargs(url: str) -> dict:
    kwargs = {"echo": settings.database.echo, "pool_pre_ping": True}
    if not url.startswith("sqlite"):
        kwargs["pool_size"] = settings.database.pool_size
    return kwargs


engine = create_async_engine(settings.database.url, **_engine_kwargs(settings.database.url))
SessionLocal = async_sessionmaker(
    bind=engine, autoflush=False, expire_on_commit=False
)

# SQLAlchemy declarative base for models
Base = declarative_base()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    async with SessionLocal() as db:
        try:
            yield db
        except Exception:
            await db.rollback()
            raise


async def init_models() -> None:
    """Create all tables (development and tests; production uses Alembic)."""
    # Import models so they register on Base.metadata
    from globetrotter import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    await engine.dispose()
