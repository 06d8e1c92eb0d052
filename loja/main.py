"""
LOJA API — application entry point.

This is the **only** file that assembles the app. Business logic lives in
the `api/`, `db/`, `models/` and `core/` packages.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from loja.api.deps import capture_request_body
from loja.api.endpoints import health
from loja.api.endpoints.auth import limiter
from loja.api.router import api_router
from loja.core.config import settings
from loja.core.exceptions import register_exception_handlers
from loja.core.logging_config import configure_logging
from loja.core.security import get_password_hash_async
from loja.db.base import Base
from loja.db.gateway import DataGateway
from loja.db.session import build_engine, build_session_factory
from loja.models.user import UserRole

configure_logging(settings.LOG_LEVEL, settings.LOG_DIR)
logger = logging.getLogger(__name__)


async def seed_master_admin(session_factory: async_sessionmaker[AsyncSession]) -> None:
    """Create the configured MASTER_ADMIN once, if it does not exist yet."""
    email, password = settings.FIRST_ADMIN_EMAIL, settings.FIRST_ADMIN_PASSWORD
    if not email or not password:
        return

    async with session_factory() as session:
        gateway = DataGateway(session)
        existing = await gateway.select("users", "id", filters={"email": email})
        if existing["data"]:
            return
        await gateway.insert(
            "users",
            {
                "email": email,
                "password": await get_password_hash_async(password),
                "name": "Administrador",
                "role": UserRole.MASTER_ADMIN.value,
                "active": True,
            },
        )
    logger.info("Default master admin created: %s (password: <redacted>)", email)


# ── Lifespan ────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    engine: AsyncEngine = app.state.engine

    if settings.DB_CREATE_TABLES:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables initialised")

    await seed_master_admin(app.state.session_factory)

    logger.info(
        "%s v%s started in %s mode, docs at /api-docs",
        settings.PROJECT_NAME,
        settings.VERSION,
        settings.ENVIRONMENT,
    )
    yield
    await engine.dispose()
    logger.info("Shutdown complete")


# ── App factory ─────────────────────────────────────────────────────
def create_app(engine: AsyncEngine | None = None) -> FastAPI:
    """Build the application around *engine* (or one built from ``DATABASE_URL``)."""
    application = FastAPI(
        title=settings.PROJECT_NAME,
        description="API do aplicativo empresarial LOJA: clientes, fornecedores e usuários",
        version=settings.VERSION,
        openapi_url="/api-docs/openapi.json",
        docs_url="/api-docs",
        redoc_url=None,
        lifespan=lifespan,
        dependencies=[Depends(capture_request_body)],
    )

    application.state.engine = engine or build_engine(settings.DATABASE_URL)
    application.state.session_factory = build_session_factory(application.state.engine)
    application.state.limiter = limiter

    # CORS
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Global exception handlers (prevent stack-trace leakage in production)
    register_exception_handlers(application)

    application.include_router(health.router)
    application.include_router(api_router, prefix=settings.API_PREFIX)

    return application


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run("loja.main:app", host=settings.HOST, port=settings.PORT)
