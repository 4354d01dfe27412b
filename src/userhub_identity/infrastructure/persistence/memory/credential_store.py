"""In-memory implementation of CredentialStore."""

import logging
from datetime import datetime
from typing import Any, Optional

from userhub_identity.domain.account import (
    Account,
    AccountUpdate,
    CredentialStore,
    DuplicateAccountError,
)
from userhub_identity.domain.shared import StoreError

logger = logging.getLogger(__name__)

# (record key, field name reported on conflict)
_UNIQUE_FIELDS = (
    ("user_name", "userName"),
    ("phone", "phone"),
    ("email", "email"),
)


class InMemoryCredentialStore(CredentialStore):
    """Dict-backed credential store for development and tests.

    Records are stored as plain dicts and copied on every read and write,
    so callers never share mutable state with the store. No method awaits
    between reading and writing a record, which makes each update atomic
    with respect to other coroutines on the same event loop.
    """

    def __init__(self) -> None:
        self._records: dict[str, dict[str, Any]] = {}

    def _to_domain(self, record: dict[str, Any]) -> Account:
        return Account.reconstitute(**record)

    def _find(self, **criteria: Any) -> Optional[dict[str, Any]]:
        for record in self._records.values():
            if all(record[key] == value for key, value in criteria.items()):
                return record
        return None

    async def find_by_id(self, account_id: str) -> Optional[Account]:
        record = self._records.get(account_id)
        return self._to_domain(record) if record is not None else None

    async def find_by_email(self, email: str) -> Optional[Account]:
        record = self._find(email=email.strip().lower())
        return self._to_domain(record) if record is not None else None

    async def find_conflicting(
        self, user_name: str, phone: str, email: str
    ) -> Optional[Account]:
        values = {"user_name": user_name, "phone": phone, "email": email.strip().lower()}
        for key, _ in _UNIQUE_FIELDS:
            record = self._find(**{key: values[key]})
            if record is not None:
                return self._to_domain(record)
        return None

    async def find_by_reset_digest(
        self, digest: str, now: datetime
    ) -> Optional[Account]:
        for record in self._records.values():
            expires_at = record["reset_token_expires_at"]
            if (
                record["reset_token"] == digest
                and expires_at is not None
                and expires_at > now
            ):
                return self._to_domain(record)
        return None

    async def insert(self, account: Account) -> Account:
        record = account.to_record()
        if record["id"] in self._records:
            msg = f"Account id already stored: {record['id']}"
            raise StoreError(msg)
        for key, field in _UNIQUE_FIELDS:
            if self._find(**{key: record[key]}) is not None:
                raise DuplicateAccountError(field, record[key])
        self._records[record["id"]] = record
        logger.debug("Inserted account %s", record["id"])
        return self._to_domain(dict(record))

    async def update_fields(
        self, account_id: str, changes: AccountUpdate
    ) -> Optional[Account]:
        record = self._records.get(account_id)
        if record is None or not changes.guards_hold(record):
            return None
        updated = dict(record)
        updated.update(changes.set_fields)
        for key, amount in changes.increment_fields.items():
            updated[key] = updated[key] + amount
        # validate before committing
        account = self._to_domain(updated)
        self._records[account_id] = updated
        return account

    async def delete_by_id(self, account_id: str) -> bool:
        return self._records.pop(account_id, None) is not None

    def __len__(self) -> int:
        return len(self._records)
