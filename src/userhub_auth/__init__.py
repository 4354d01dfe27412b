"""userhub auth - account-agnostic credential primitives.

This package knows nothing about accounts or storage. It handles:
- Password hashing (bcrypt) with an explicit cost factor
- Password composition rules
- JWT issuance and verification
- Password reset token generation and digesting

Architecture:
    userhub_auth/
    ├── services/           # Pure logic (hashing, policy, JWT, reset tokens)
    ├── schemas.py          # Data classes
    └── exceptions.py       # Internal auth exceptions

Usage:
    from userhub_auth import JWTService, PasswordHashingService

    hasher = PasswordHashingService(rounds=12)
    password_hash = hasher.hash("Password1!")
"""

from userhub_auth.exceptions import (
    AuthError,
    ExpiredTokenError,
    HashingError,
    InvalidTokenError,
    TokenError,
)
from userhub_auth.schemas import TokenPayload
from userhub_auth.services import (
    JWTService,
    PasswordHashingService,
    PasswordPolicy,
    ResetTokenService,
)

__all__ = [
    # Services
    "JWTService",
    "PasswordHashingService",
    "PasswordPolicy",
    "ResetTokenService",
    # Schemas
    "TokenPayload",
    # Exceptions
    "AuthError",
    "ExpiredTokenError",
    "HashingError",
    "InvalidTokenError",
    "TokenError",
]
