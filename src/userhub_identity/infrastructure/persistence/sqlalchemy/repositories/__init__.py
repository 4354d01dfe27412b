"""SQLAlchemy repository implementations for identity management."""

from userhub_identity.infrastructure.persistence.sqlalchemy.repositories.credential_store import (  # noqa: E501
    CredentialStoreSQLAlchemy,
)

__all__ = ["CredentialStoreSQLAlchemy"]
