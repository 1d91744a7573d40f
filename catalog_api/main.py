"""Catalog API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map every failure to the standard envelope
    - CORS configured from settings (not hardcoded)
    - AuthConfig built once on startup; a missing signing secret aborts startup

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Error stacks exposed in responses only when not running in production
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from catalog_api.api.error_handlers import register_error_handlers
from catalog_api.api.routes import authors, books, health, users
from catalog_api.config import get_settings
import catalog_api.infrastructure.database as database
from catalog_api.infrastructure.credentials import AuthConfig
from catalog_api.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    app.state.auth_config = AuthConfig.from_settings(settings)
    database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("Catalog API started")
    yield
    if database.db_manager:
        await database.db_manager.dispose()
    logger.info("Catalog API shutting down")


app = FastAPI(title="Catalog API", version="1.0.0", lifespan=lifespan)

# CORS — configured from settings, not hardcoded
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes — explicit registration
app.include_router(health.router)
app.include_router(books.router)
app.include_router(authors.router)
app.include_router(users.router)

register_error_handlers(app, production=settings.is_production)
