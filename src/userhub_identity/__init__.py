"""userhub identity - accounts, authentication and credential lifecycle.

This module handles all identity-related concerns:
- Account registration with ordered input validation
- Login with login bookkeeping
- Password change and password reset by email
- Profile image references
- Access token authentication

Credential primitives (hashing, policy, JWT, reset tokens) live in
userhub_auth; this package composes them with the Account domain.
"""

from userhub_identity.application.ports import ImageStore, Mailer
from userhub_identity.application.services import (
    AuthenticationService,
    PasswordResetService,
)
from userhub_identity.domain.account import (
    Account,
    AccountNotFoundError,
    AccountRole,
    AccountStatus,
    AccountUpdate,
    CredentialStore,
    DuplicateAccountError,
    Gender,
    NewAccountRequest,
    ProfileImage,
)
from userhub_identity.domain.shared import (
    ConflictError,
    DomainException,
    ErrorCode,
    InvalidInputError,
    InvalidOrExpiredTokenError,
    StoreError,
    UnauthorizedError,
)

__all__ = [
    # Application
    "AuthenticationService",
    "ImageStore",
    "Mailer",
    "PasswordResetService",
    # Domain - Account
    "Account",
    "AccountNotFoundError",
    "AccountRole",
    "AccountStatus",
    "AccountUpdate",
    "CredentialStore",
    "DuplicateAccountError",
    "Gender",
    "NewAccountRequest",
    "ProfileImage",
    # Domain - Errors
    "ConflictError",
    "DomainException",
    "ErrorCode",
    "InvalidInputError",
    "InvalidOrExpiredTokenError",
    "StoreError",
    "UnauthorizedError",
]
