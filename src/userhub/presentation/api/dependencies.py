"""FastAPI dependency injection for the userhub API.

Provides dependencies for:
- The credential store (in-memory or SQLAlchemy)
- Credential primitives configured from settings
- Application services
- Authentication (current account from JWT)
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from userhub.presentation.api.config import get_api_settings
from userhub_auth import (
    JWTService,
    PasswordHashingService,
    PasswordPolicy,
    ResetTokenService,
)
from userhub_config.settings import Settings
from userhub_identity import (
    Account,
    AuthenticationService,
    CredentialStore,
    ImageStore,
    Mailer,
    PasswordResetService,
)
from userhub_identity.infrastructure.email import EmailService
from userhub_identity.infrastructure.persistence.memory import (
    InMemoryCredentialStore,
)
from userhub_identity.infrastructure.persistence.sqlalchemy import (
    CredentialStoreSQLAlchemy,
)

logger = logging.getLogger(__name__)

# Security scheme for JWT Bearer tokens
security = HTTPBearer(auto_error=False)

SettingsDep = Annotated[Settings, Depends(get_api_settings)]


# -----------------------------------------------------------------------------
# Database Engine & Session (Singleton per URL)
# -----------------------------------------------------------------------------


@lru_cache()
def get_engine(database_url: str) -> AsyncEngine:
    """
    Get the shared async database engine for a URL.

    The engine manages the connection pool and is reused across all requests.

    Returns
    -------
    AsyncEngine instance
    """
    # Ensure data directory exists for SQLite
    if database_url.startswith("sqlite") and ":memory:" not in database_url:
        db_path = database_url.split("///")[-1]
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    return create_async_engine(
        database_url,
        echo=False,
        pool_pre_ping=True,  # Verify connections before use
    )


@lru_cache()
def get_session_maker(database_url: str) -> async_sessionmaker[AsyncSession]:
    """
    Get the shared async session maker for a URL.

    Returns
    -------
    async_sessionmaker configured with the shared engine
    """
    return async_sessionmaker(
        get_engine(database_url),
        class_=AsyncSession,
        expire_on_commit=False,
    )


def build_credential_store(settings: Settings) -> CredentialStore:
    """Create the credential store selected by ``store_backend``."""
    if settings.store_backend == "memory":
        logger.info("Using in-memory credential store")
        return InMemoryCredentialStore()
    return CredentialStoreSQLAlchemy(get_session_maker(settings.database_url))


def get_credential_store(request: Request) -> CredentialStore:
    """Get the credential store owned by the running application."""
    return request.app.state.credential_store


CredentialStoreDep = Annotated[CredentialStore, Depends(get_credential_store)]


# -----------------------------------------------------------------------------
# Credential Primitives
# -----------------------------------------------------------------------------


def get_password_service(settings: SettingsDep) -> PasswordHashingService:
    """Get password hashing service with the configured cost factor."""
    return PasswordHashingService(rounds=settings.password_hash_rounds)


def get_password_policy(settings: SettingsDep) -> PasswordPolicy:
    return PasswordPolicy(
        min_length=settings.password_min_length,
        max_length=settings.password_max_length,
    )


def get_jwt_service(settings: SettingsDep) -> JWTService:
    """Get JWT service configured with API settings."""
    return JWTService(
        secret_key=settings.jwt_secret_key.get_secret_value(),
        access_token_expire_hours=settings.jwt_access_token_expire_hours,
    )


def get_reset_token_service(settings: SettingsDep) -> ResetTokenService:
    return ResetTokenService(digest_algorithm=settings.reset_token_digest_algorithm)


def get_mailer(settings: SettingsDep) -> Mailer:
    return EmailService(settings)


def get_image_store(request: Request) -> Optional[ImageStore]:
    return getattr(request.app.state, "image_store", None)


# -----------------------------------------------------------------------------
# Application Services
# -----------------------------------------------------------------------------


async def get_authentication_service(
    store: CredentialStoreDep,
    password_service: PasswordHashingService = Depends(get_password_service),
    password_policy: PasswordPolicy = Depends(get_password_policy),
    jwt_service: JWTService = Depends(get_jwt_service),
    image_store: Optional[ImageStore] = Depends(get_image_store),
) -> AuthenticationService:
    """
    Get authentication service with all dependencies.

    This service orchestrates registration, login and credential changes.
    """
    return AuthenticationService(
        credential_store=store,
        password_service=password_service,
        password_policy=password_policy,
        jwt_service=jwt_service,
        image_store=image_store,
    )


# Type alias for injected auth service
AuthService = Annotated[AuthenticationService, Depends(get_authentication_service)]


async def get_password_reset_service(  # noqa: PLR0913
    settings: SettingsDep,
    store: CredentialStoreDep,
    reset_token_service: ResetTokenService = Depends(get_reset_token_service),
    password_service: PasswordHashingService = Depends(get_password_service),
    password_policy: PasswordPolicy = Depends(get_password_policy),
    mailer: Mailer = Depends(get_mailer),
) -> PasswordResetService:
    return PasswordResetService(
        credential_store=store,
        reset_token_service=reset_token_service,
        password_service=password_service,
        password_policy=password_policy,
        mailer=mailer,
        reset_link_base=settings.reset_link_base,
        token_expiry_minutes=settings.reset_token_expire_minutes,
    )


ResetService = Annotated[PasswordResetService, Depends(get_password_reset_service)]


# -----------------------------------------------------------------------------
# Current Account (JWT Authentication)
# -----------------------------------------------------------------------------


async def get_current_account(
    auth_service: AuthService,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> Account:
    """
    FastAPI dependency to get the current authenticated account from JWT.

    Raises
    ------
    UnauthorizedError
        If the token is missing, expired or invalid, or the account is gone
        or deleted (rendered as 401 by the exception handlers)
    """
    token = credentials.credentials if credentials is not None else None
    return await auth_service.authenticate(token)


# Type alias for injected current account
CurrentAccount = Annotated[Account, Depends(get_current_account)]
