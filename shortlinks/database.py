"""Database handle and session management for the short link service.

This module provides the SQLAlchemy async engine setup, session factory and
lifecycle operations. The handle is built explicitly by the application
lifespan (or a test fixture) and passed to the components that need it; there
is no module-level engine.

Flow Diagram — Database Operations
=================================
::
    ┌─────────────┐
    │  lifespan   │
    │  startup    │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Database(   │
    │  url)       │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ create_all()│
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ session()   │
    │ per unit of │
    │ work        │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ dispose()   │
    │ on shutdown │
    └─────────────┘

How to Use
===========
**Step 1 — Build the handle**::
    database = Database.from_settings(settings)
    await database.create_all()

**Step 2 — Run a unit of work**::
    async with database.session() as session, session.begin():
        session.add(Link(code="abc123", destination_url="https://example.com/"))

**Step 3 — Cleanup on shutdown**::
    await database.dispose()

Key Behaviours
===============
- Every store operation opens and closes its own session.
- Connection pooling is configured for PostgreSQL; SQLite (tests) uses the
  driver defaults.
- Tables are created automatically on application startup.

Classes:
    Base:  SQLAlchemy declarative base for all models.
    Database:  Engine plus session factory owned by the process.
"""

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from shortlinks.config import Settings

__all__ = ["Base", "Database"]


class Base(DeclarativeBase):
    pass


class Database:
    def __init__(self, url: str, *, echo: bool = False, pool_size: int = 20, max_overflow: int = 10) -> None:
        engine_kwargs: dict = {"echo": echo, "pool_pre_ping": True}
        if not make_url(url).get_backend_name().startswith("sqlite"):
            engine_kwargs.update(pool_size=pool_size, max_overflow=max_overflow)

        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        self._sessionmaker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(
            settings.DATABASE_URL,
            echo=settings.DATABASE_ECHO,
            pool_size=settings.DATABASE_POOL_SIZE,
            max_overflow=settings.DATABASE_MAX_OVERFLOW,
        )

    def session(self) -> AsyncSession:
        return self._sessionmaker()

    async def create_all(self) -> None:
        from shortlinks import models  # noqa: F401  registers tables on Base.metadata

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def ping(self) -> None:
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def dispose(self) -> None:
        await self.engine.dispose()
