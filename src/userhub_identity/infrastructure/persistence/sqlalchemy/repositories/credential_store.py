"""SQLAlchemy implementation of CredentialStore."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from enum import Enum
from typing import Any, AsyncIterator, Optional

from sqlalchemy import delete, or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from userhub_identity.domain.account import (
    Account,
    AccountUpdate,
    CredentialStore,
    DuplicateAccountError,
    ProfileImage,
)
from userhub_identity.domain.shared import StoreError
from userhub_identity.infrastructure.persistence.sqlalchemy.models import AccountModel

logger = logging.getLogger(__name__)

# (column, field name reported on conflict), in tie-break order
_UNIQUE_COLUMNS = (
    ("user_name", "userName"),
    ("phone", "phone"),
    ("email", "email"),
)


def _conflicting_field(error: IntegrityError) -> str:
    """Guess the collided field from a unique violation message."""
    text = str(error.orig).lower()
    for column, field in _UNIQUE_COLUMNS:
        if f"uq_accounts_{column}" in text or f"accounts.{column}" in text:
            return field
    return "account"


def _column_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, ProfileImage):
        return value.to_dict()
    return value


class CredentialStoreSQLAlchemy(CredentialStore):
    """SQLAlchemy implementation of the CredentialStore interface.

    Every operation runs in its own short transaction so that flows can
    compensate earlier steps. Field updates are issued as a single
    ``UPDATE`` statement, counters are incremented in SQL, so concurrent
    logins never lose an increment. Guards become extra ``WHERE`` clauses,
    so a guarded update either applies or matches no row.
    """

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]) -> None:
        self._session_maker = session_maker

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[AsyncSession]:
        try:
            async with self._session_maker() as session, session.begin():
                yield session
        except IntegrityError as e:
            raise DuplicateAccountError(_conflicting_field(e)) from e
        except SQLAlchemyError as e:
            logger.error("Credential store failure: %s", e)
            raise StoreError(details={"error": str(e)}) from e

    async def find_by_id(self, account_id: str) -> Optional[Account]:
        async with self._transaction() as session:
            model = await session.get(AccountModel, account_id)
            return self._map_to_domain(model) if model is not None else None

    async def find_by_email(self, email: str) -> Optional[Account]:
        stmt = select(AccountModel).where(AccountModel.email == email.strip().lower())
        return await self._find_one(stmt)

    async def find_conflicting(
        self, user_name: str, phone: str, email: str
    ) -> Optional[Account]:
        values = {"user_name": user_name, "phone": phone, "email": email.strip().lower()}
        stmt = select(AccountModel).where(
            or_(
                AccountModel.user_name == values["user_name"],
                AccountModel.phone == values["phone"],
                AccountModel.email == values["email"],
            )
        )
        async with self._transaction() as session:
            result = await session.execute(stmt)
            models = list(result.scalars().all())
            for column, _ in _UNIQUE_COLUMNS:
                for model in models:
                    if getattr(model, column) == values[column]:
                        return self._map_to_domain(model)
        return None

    async def find_by_reset_digest(
        self, digest: str, now: datetime
    ) -> Optional[Account]:
        stmt = select(AccountModel).where(
            AccountModel.reset_token == digest,
            AccountModel.reset_token_expires_at.is_not(None),
            AccountModel.reset_token_expires_at > now,
        )
        return await self._find_one(stmt)

    async def insert(self, account: Account) -> Account:
        model = self._map_to_model(account)
        async with self._transaction() as session:
            session.add(model)
            try:
                await session.flush()
            except IntegrityError as e:
                field = _conflicting_field(e)
                value = {
                    "userName": account.user_name,
                    "phone": account.phone,
                    "email": account.email,
                }.get(field)
                raise DuplicateAccountError(field, value) from e
            logger.info("Created account: %s", account.id)
            return self._map_to_domain(model)

    async def update_fields(
        self, account_id: str, changes: AccountUpdate
    ) -> Optional[Account]:
        values: dict[str, Any] = {
            key: _column_value(value) for key, value in changes.set_fields.items()
        }
        for key, amount in changes.increment_fields.items():
            values[key] = getattr(AccountModel, key) + amount

        conditions = [AccountModel.id == account_id]
        for key, expected in changes.expected_fields.items():
            conditions.append(getattr(AccountModel, key) == expected)
        if changes.live_reset_token_at is not None:
            conditions.append(
                AccountModel.reset_token_expires_at > changes.live_reset_token_at
            )

        stmt = (
            update(AccountModel)
            .where(*conditions)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        async with self._transaction() as session:
            result = await session.execute(stmt)
            if result.rowcount == 0:  # type: ignore[attr-defined]
                if changes.is_conditional:
                    logger.debug("Guarded update skipped for account %s", account_id)
                return None
            refreshed = await session.execute(
                select(AccountModel)
                .where(AccountModel.id == account_id)
                .execution_options(populate_existing=True)
            )
            return self._map_to_domain(refreshed.scalar_one())

    async def delete_by_id(self, account_id: str) -> bool:
        stmt = delete(AccountModel).where(AccountModel.id == account_id)
        async with self._transaction() as session:
            result = await session.execute(stmt)
            deleted = result.rowcount > 0  # type: ignore[attr-defined]
        if deleted:
            logger.info("Deleted account: %s", account_id)
        return deleted

    async def _find_one(self, stmt: Any) -> Optional[Account]:
        async with self._transaction() as session:
            result = await session.execute(stmt)
            model = result.scalar_one_or_none()
            return self._map_to_domain(model) if model is not None else None

    def _map_to_domain(self, model: AccountModel) -> Account:
        return Account.reconstitute(
            id=model.id,
            name=model.name,
            user_name=model.user_name,
            email=model.email,
            phone=model.phone,
            gender=model.gender,
            password_hash=model.password_hash,
            role=model.role,
            status=model.status,
            profile_image=(
                ProfileImage.from_dict(model.profile_image)
                if model.profile_image
                else None
            ),
            reset_token=model.reset_token,
            reset_token_expires_at=model.reset_token_expires_at,
            login_count=model.login_count,
            last_login_at=model.last_login_at,
            password_changed_at=model.password_changed_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _map_to_model(self, account: Account) -> AccountModel:
        record = {key: _column_value(value) for key, value in account.to_record().items()}
        return AccountModel(**record)
