"""Account aggregate: identity, credentials and login bookkeeping."""

import secrets
import string
from datetime import datetime
from typing import Any, Optional, Union

from userhub_identity.domain.account.value_objects import (
    AccountRole,
    AccountStatus,
    Gender,
    ProfileImage,
)
from userhub_identity.domain.shared.time import ensure_tz_aware, utc_now

ACCOUNT_ID_LENGTH = 12
_ID_ALPHABET = string.ascii_letters + string.digits


def generate_account_id(length: int = ACCOUNT_ID_LENGTH) -> str:
    """Return a random alphanumeric account id."""
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(length))


def _aware(value: Optional[datetime]) -> Optional[datetime]:
    return ensure_tz_aware(value) if value is not None else None


class Account:
    """
    Account aggregate root.

    The aggregate is a snapshot of the stored record. State changes go
    through :class:`AccountUpdate` and the credential store so that each
    change is applied atomically; the aggregate itself only answers
    questions about its state.
    """

    def __init__(  # noqa: PLR0913
        self,
        name: str,
        user_name: str,
        email: str,
        phone: str,
        gender: Union[str, Gender],
        password_hash: str,
        id: Optional[str] = None,
        role: Union[str, AccountRole] = AccountRole.USER,
        status: Union[str, AccountStatus] = AccountStatus.ACTIVE,
        profile_image: Optional[ProfileImage] = None,
        reset_token: Optional[str] = None,
        reset_token_expires_at: Optional[datetime] = None,
        login_count: int = 0,
        last_login_at: Optional[datetime] = None,
        password_changed_at: Optional[datetime] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ):
        if (reset_token is None) != (reset_token_expires_at is None):
            msg = "reset_token and reset_token_expires_at must be set together"
            raise ValueError(msg)

        now = utc_now()
        self._id = id or generate_account_id()
        self._name = name
        self._user_name = user_name
        self._email = email.strip().lower()
        self._phone = phone
        self._gender = gender if isinstance(gender, Gender) else Gender(gender)
        self._password_hash = password_hash
        self._role = role if isinstance(role, AccountRole) else AccountRole(role)
        self._status = (
            status if isinstance(status, AccountStatus) else AccountStatus(status)
        )
        self._profile_image = profile_image
        self._reset_token = reset_token
        self._reset_token_expires_at = _aware(reset_token_expires_at)
        self._login_count = login_count
        self._last_login_at = _aware(last_login_at)
        self._password_changed_at = _aware(password_changed_at)
        self._created_at = _aware(created_at) or now
        self._updated_at = _aware(updated_at) or now

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def user_name(self) -> str:
        return self._user_name

    @property
    def email(self) -> str:
        return self._email

    @property
    def phone(self) -> str:
        return self._phone

    @property
    def gender(self) -> Gender:
        return self._gender

    @property
    def password_hash(self) -> str:
        return self._password_hash

    @property
    def role(self) -> AccountRole:
        return self._role

    @property
    def is_admin(self) -> bool:
        return self._role == AccountRole.ADMIN

    @property
    def status(self) -> AccountStatus:
        return self._status

    @property
    def profile_image(self) -> Optional[ProfileImage]:
        return self._profile_image

    @property
    def reset_token(self) -> Optional[str]:
        return self._reset_token

    @property
    def reset_token_expires_at(self) -> Optional[datetime]:
        return self._reset_token_expires_at

    @property
    def login_count(self) -> int:
        return self._login_count

    @property
    def last_login_at(self) -> Optional[datetime]:
        return self._last_login_at

    @property
    def password_changed_at(self) -> Optional[datetime]:
        return self._password_changed_at

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    @property
    def is_usable(self) -> bool:
        """Whether the account may authenticate. Soft-deleted accounts may not."""
        return self._status != AccountStatus.DELETED

    def has_live_reset_token(self, now: Optional[datetime] = None) -> bool:
        if self._reset_token_expires_at is None:
            return False
        return self._reset_token_expires_at > (now or utc_now())

    def to_record(self) -> dict[str, Any]:
        """Full state as a plain dict, suitable for ``reconstitute``."""
        return {
            "id": self._id,
            "name": self._name,
            "user_name": self._user_name,
            "email": self._email,
            "phone": self._phone,
            "gender": self._gender,
            "password_hash": self._password_hash,
            "role": self._role,
            "status": self._status,
            "profile_image": self._profile_image,
            "reset_token": self._reset_token,
            "reset_token_expires_at": self._reset_token_expires_at,
            "login_count": self._login_count,
            "last_login_at": self._last_login_at,
            "password_changed_at": self._password_changed_at,
            "created_at": self._created_at,
            "updated_at": self._updated_at,
        }

    def to_public_dict(self) -> dict[str, Any]:
        """External view: no password hash and no reset token fields."""

        def _iso(value: Optional[datetime]) -> Optional[str]:
            return value.isoformat() if value is not None else None

        return {
            "id": self._id,
            "name": self._name,
            "userName": self._user_name,
            "email": self._email,
            "phone": self._phone,
            "gender": self._gender.value,
            "role": self._role.value,
            "status": self._status.value,
            "profileImage": (
                self._profile_image.to_dict() if self._profile_image else None
            ),
            "loginCount": self._login_count,
            "lastLoginAt": _iso(self._last_login_at),
            "passwordChangedAt": _iso(self._password_changed_at),
            "createdAt": _iso(self._created_at),
            "updatedAt": _iso(self._updated_at),
        }

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        name: str,
        user_name: str,
        email: str,
        phone: str,
        gender: Union[str, Gender],
        password_hash: str,
        profile_image: Optional[ProfileImage] = None,
        role: AccountRole = AccountRole.USER,
    ) -> "Account":
        """Create a new active account that counts as logged in once."""
        now = utc_now()
        return cls(
            name=name,
            user_name=user_name,
            email=email,
            phone=phone,
            gender=gender,
            password_hash=password_hash,
            role=role,
            status=AccountStatus.ACTIVE,
            profile_image=profile_image,
            login_count=1,
            last_login_at=now,
            created_at=now,
            updated_at=now,
        )

    @classmethod
    def reconstitute(cls, **record: Any) -> "Account":
        """Rebuild an account from a stored record (see ``to_record``)."""
        return cls(**record)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Account):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return f"Account(id={self._id}, email={self._email})"
