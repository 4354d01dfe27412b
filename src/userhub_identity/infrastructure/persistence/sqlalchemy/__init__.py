"""SQLAlchemy implementation for userhub_identity persistence.

Provides:
- IdentityBase: Declarative base for identity models
- AccountModel: SQLAlchemy model for accounts
- CredentialStoreSQLAlchemy: CredentialStore implementation
"""

from userhub_identity.infrastructure.persistence.sqlalchemy.base import IdentityBase
from userhub_identity.infrastructure.persistence.sqlalchemy.models import AccountModel
from userhub_identity.infrastructure.persistence.sqlalchemy.repositories import (
    CredentialStoreSQLAlchemy,
)

__all__ = [
    "AccountModel",
    "CredentialStoreSQLAlchemy",
    "IdentityBase",
]
