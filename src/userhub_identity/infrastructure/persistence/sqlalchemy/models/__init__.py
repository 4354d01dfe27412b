"""SQLAlchemy models for identity management."""

from userhub_identity.infrastructure.persistence.sqlalchemy.models.account_model import (  # noqa: E501
    AccountModel,
)

__all__ = ["AccountModel"]
