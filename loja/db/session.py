"""
Async SQLAlchemy engine & session factory (asyncpg driver).

Nothing is created at import time: ``create_app`` builds the engine once and
keeps it, with its session factory, on ``app.state``.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import (AsyncEngine, AsyncSession,
                                    async_sessionmaker, create_async_engine)


def build_engine(database_url: str) -> AsyncEngine:
    engine_args: dict[str, Any] = {
        "echo": False,
        "pool_pre_ping": True,
    }

    if "postgresql" in database_url:
        engine_args.update(
            {
                "pool_size": 20,
                "max_overflow": 10,
                "pool_recycle": 300,
                # Supabase's pooler (pgbouncer) does not keep prepared statements
                "connect_args": {"statement_cache_size": 0},
            }
        )

    return create_async_engine(database_url, **engine_args)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
