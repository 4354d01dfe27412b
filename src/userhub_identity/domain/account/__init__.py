"""Account domain: identity, credentials and login bookkeeping.

This domain handles:
- Account aggregate (profile, password hash, reset token, login counters)
- Registration validation
- The credential store port
"""

from userhub_identity.domain.account.aggregates import Account, generate_account_id
from userhub_identity.domain.account.exceptions import (
    AccountNotFoundError,
    DuplicateAccountError,
)
from userhub_identity.domain.account.repositories import CredentialStore
from userhub_identity.domain.account.validation import validate_new_account
from userhub_identity.domain.account.value_objects import (
    AccountRole,
    AccountStatus,
    AccountUpdate,
    Gender,
    NewAccountRequest,
    ProfileImage,
)

__all__ = [
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
    "generate_account_id",
    "validate_new_account",
]
