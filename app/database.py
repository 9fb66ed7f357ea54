"""Database Engine, Session Factory and Dependencies"""

import ssl
from typing import Any, AsyncGenerator, Dict, Tuple

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from app.config import settings


def normalize_database_url(url: str) -> Tuple[str, Dict[str, Any]]:
    """
    Turn a libpq-style URL into an asyncpg URL plus connect_args.

    asyncpg does not understand `sslmode`, so it is always stripped from the
    query string. require/verify-full become an SSL context that encrypts
    without verifying the server certificate (managed Postgres certificates
    often fail hostname checks).

    Non-Postgres URLs (e.g. sqlite+aiosqlite) are returned unchanged.
    """
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    if url.startswith("postgresql://"):
        url = "postgresql+asyncpg://" + url[len("postgresql://"):]

    connect_args: Dict[str, Any] = {}
    if not url.startswith("postgresql+asyncpg://") or "?" not in url:
        return url, connect_args

    base, _, query = url.partition("?")
    params = []
    for param in query.split("&"):
        key, _, value = param.partition("=")
        if key.lower() != "sslmode":
            if param:
                params.append(param)
            continue
        if value.lower() in ("require", "required", "verify-full"):
            ssl_ctx = ssl.create_default_context()
            ssl_ctx.check_hostname = False
            ssl_ctx.verify_mode = ssl.CERT_NONE
            connect_args["ssl"] = ssl_ctx

    url = base + ("?" + "&".join(params) if params else "")
    return url, connect_args


database_url, connect_args = normalize_database_url(settings.DATABASE_URL)

engine_options: Dict[str, Any] = {
    "connect_args": connect_args,
    "pool_pre_ping": True,
    "echo": settings.DEBUG,
}
if not database_url.startswith("sqlite"):
    # The stats fan-out checks out one connection per query, so pool_size +
    # max_overflow must cover at least nine concurrent checkouts per request.
    engine_options.update(
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
    )

engine = create_async_engine(database_url, **engine_options)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

Base = declarative_base()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session for handlers that run queries one after another"""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Dependency returning the session factory.

    Used by handlers that fan out several queries at once: an AsyncSession
    must not be shared between concurrent tasks, so each query opens its
    own session from this factory.
    """
    return AsyncSessionLocal


async def init_db() -> None:
    """Create missing tables (development only; use Alembic elsewhere)"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Close database connections"""
    await engine.dispose()
