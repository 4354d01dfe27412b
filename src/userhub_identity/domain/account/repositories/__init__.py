from userhub_identity.domain.account.repositories.credential_store import (
    CredentialStore,
)

__all__ = ["CredentialStore"]
