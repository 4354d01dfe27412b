"""Shared domain building blocks."""

from userhub_identity.domain.shared.exceptions import (
    ConflictError,
    DomainException,
    EntityNotFoundError,
    ErrorCode,
    InvalidInputError,
    InvalidOrExpiredTokenError,
    StoreError,
    UnauthorizedError,
)
from userhub_identity.domain.shared.time import ensure_tz_aware, utc_now

__all__ = [
    "ConflictError",
    "DomainException",
    "EntityNotFoundError",
    "ErrorCode",
    "InvalidInputError",
    "InvalidOrExpiredTokenError",
    "StoreError",
    "UnauthorizedError",
    "ensure_tz_aware",
    "utc_now",
]
