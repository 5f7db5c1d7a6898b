# backend/xregions/db.py
from sqlalchemy.ext.asyncio import (AsyncEngine, AsyncSession, async_sessionmaker,
                                    create_async_engine)

from . import config


def create_engine(url: str | None = None, **kwargs) -> AsyncEngine:
    """Create the async SQLAlchemy engine (defaults to XREGIONS_DATABASE_URL)."""
    kwargs.setdefault("echo", False)  # True if you want to see SQL
    return create_async_engine(url or config.DATABASE_URL, **kwargs)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        expire_on_commit=False,
    )
