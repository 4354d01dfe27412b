"""FastAPI application factory.

Creates and configures the FastAPI application with the account router,
middleware, and exception handlers.
"""

import logging
import sys
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from userhub.presentation.api.config import get_api_settings
from userhub.presentation.api.dependencies import build_credential_store, get_engine
from userhub.presentation.api.exception_handlers import setup_exception_handlers
from userhub.presentation.api.routers import accounts_router
from userhub_config.settings import Settings, get_settings
from userhub_identity.infrastructure.persistence.sqlalchemy import IdentityBase
from userhub_identity.infrastructure.storage import S3ImageStore


@lru_cache(maxsize=1)
def _configure_logging(log_level_name: str) -> None:
    """Configure application logging.

    Sets up logging for the userhub application with:
    - Console output with timestamps and module names
    - Configurable log level for userhub modules (from settings)
    - WARNING level for noisy third-party libraries
    """
    log_level = getattr(logging, log_level_name.upper(), logging.INFO)

    # Define log format
    log_format = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    # Configure root logger
    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt=date_format,
        stream=sys.stdout,
        force=True,  # Override any existing config
    )

    # Set levels for our application
    for name in ("userhub", "userhub_auth", "userhub_identity"):
        logging.getLogger(name).setLevel(log_level)

    # Quiet down noisy third-party loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("boto3").setLevel(logging.WARNING)


logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"

OPENAPI_TAGS = [
    {
        "name": "Accounts",
        "description": """Account registration, login and credential management.

**Registration & Login:**
- Register new accounts (name, user name, gender, email, phone, password)
- Login to obtain a JWT access token
- Login count and last login time are recorded

**Passwords:**
- Passwords are securely hashed (bcrypt)
- Change password while logged in
- Reset a forgotten password with an emailed link (valid for 10 minutes)
""",
    },
    {
        "name": "Health",
        "description": "Service health monitoring endpoints.",
    },
]


def _lifespan_for(settings: Settings):
    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan manager."""
        logger.info("Starting userhub API v%s...", API_VERSION)
        if settings.store_backend == "sqlalchemy":
            engine = get_engine(settings.database_url)
            logger.info("Initializing database schema...")
            async with engine.begin() as conn:
                await conn.run_sync(IdentityBase.metadata.create_all)
            logger.info("Database schema initialized successfully")
            yield
            logger.info("Shutting down userhub API...")
            await engine.dispose()
            logger.info("Database connections closed")
        else:
            yield
            logger.info("Shutting down userhub API...")

    return lifespan


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Parameters
    ----------
    settings
        Optional settings override for testing.

    Returns
    -------
    Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    # Configure logging on first app creation (not on module import)
    _configure_logging(settings.log_level)

    app = FastAPI(
        title=f"{settings.app_name} API",
        description="User accounts with **password** and **JWT** authentication.",
        version=API_VERSION,
        docs_url="/docs" if settings.api_debug else None,
        redoc_url="/redoc" if settings.api_debug else None,
        openapi_url="/openapi.json" if settings.api_debug else None,
        lifespan=_lifespan_for(settings),
        openapi_tags=OPENAPI_TAGS,
    )

    app.dependency_overrides[get_api_settings] = lambda: settings
    app.state.credential_store = build_credential_store(settings)
    app.state.image_store = S3ImageStore.from_settings(settings)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register domain exception handlers for consistent error responses
    setup_exception_handlers(app)

    app.include_router(accounts_router, prefix="/user", tags=["Accounts"])

    @app.get("/health", tags=["Health"])
    async def health_check() -> dict:
        """Health check endpoint."""
        return {
            "status": "healthy",
            "version": API_VERSION,
        }

    return app
