from userhub_identity.infrastructure.persistence.memory.credential_store import (
    InMemoryCredentialStore,
)

__all__ = ["InMemoryCredentialStore"]
