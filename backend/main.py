"""Orphanage Admin: user accounts and staff profiles for an orphanage.

FastAPI entry point with lifespan management and CORS.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from .api.router import api_router
from .config import get_config
from .database import close_engine, create_tables
from .dependencies import get_app_config, get_db, get_identity_store
from .middleware.error_handler import register_error_handlers
from .middleware.request_id import RequestIDMiddleware
from .utils.logging import get_logger, setup_logging

config = get_config()
logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown lifecycle."""
    app_config = get_app_config()
    setup_logging(app_config)
    logger.info("starting", app=app_config.app_name)

    await create_tables(app_config)
    logger.info("database_initialized")

    if app_config.bootstrap_admin_email and app_config.bootstrap_admin_password:
        await get_identity_store().ensure_bootstrap_admin(
            app_config.bootstrap_admin_email,
            app_config.bootstrap_admin_password,
        )

    yield

    await close_engine()
    logger.info("shutdown_complete")


app = FastAPI(
    title=config.app_name,
    description="User accounts and staff profiles administration API",
    version="1.0.0",
    lifespan=lifespan,
)

register_error_handlers(app)

app.add_middleware(RequestIDMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.get("/health")
async def health(db: AsyncSession = Depends(get_db)):
    """Liveness check; also confirms the database answers."""
    await db.execute(text("SELECT 1"))
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


def main():
    """Run the Orphanage Admin server."""
    uvicorn.run(
        "backend.main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level="debug" if config.debug else "info",
    )


if __name__ == "__main__":
    main()
