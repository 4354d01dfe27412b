"""Credential store interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from userhub_identity.domain.account.aggregates import Account
from userhub_identity.domain.account.value_objects import AccountUpdate


class CredentialStore(ABC):
    """Persistence port for Account aggregates.

    Implementations raise ``DuplicateAccountError`` when an insert violates
    email/userName/phone uniqueness and ``StoreError`` for any other
    failure of the backing store.
    """

    @abstractmethod
    async def find_by_id(self, account_id: str) -> Optional[Account]:
        """Find an account by its id."""

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[Account]:
        """Find an account by email. The email is lower-cased before lookup."""

    @abstractmethod
    async def find_conflicting(
        self, user_name: str, phone: str, email: str
    ) -> Optional[Account]:
        """Find any account sharing the user name, phone or email."""

    @abstractmethod
    async def find_by_reset_digest(
        self, digest: str, now: datetime
    ) -> Optional[Account]:
        """Find the account whose reset token equals ``digest`` and is still live."""

    @abstractmethod
    async def insert(self, account: Account) -> Account:
        """Persist a new account and return the stored snapshot."""

    @abstractmethod
    async def update_fields(
        self, account_id: str, changes: AccountUpdate
    ) -> Optional[Account]:
        """Atomically apply ``changes`` and return the new snapshot.

        Returns ``None`` if no account has the given id, or if a guard
        carried by ``changes`` does not hold for the stored record. A
        skipped update writes nothing.
        """

    @abstractmethod
    async def delete_by_id(self, account_id: str) -> bool:
        """Hard-delete an account. Returns whether one was removed."""
