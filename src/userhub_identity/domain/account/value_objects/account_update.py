"""Partial, atomic updates applied by the credential store.

An update combines ``$set``-style field replacement with ``$inc``-style
counter increments. It may carry guards: expected field values and a
reset token that must still be live. Stores apply one update atomically
per account and skip it when a guard does not hold.
"""

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Mapping, Optional

from userhub_identity.domain.account.value_objects.profile_image import ProfileImage

SETTABLE_FIELDS = frozenset(
    {
        "password_hash",
        "status",
        "role",
        "profile_image",
        "reset_token",
        "reset_token_expires_at",
        "last_login_at",
        "password_changed_at",
        "updated_at",
    }
)
INCREMENTABLE_FIELDS = frozenset({"login_count"})
GUARDABLE_FIELDS = frozenset({"password_hash", "reset_token"})


@dataclass(frozen=True)
class AccountUpdate:
    """A validated set of field assignments and counter increments.

    Use the named constructors; they always refresh ``updated_at`` and keep
    the reset token and its expiry together.

    Attributes
    ----------
    set_fields
        Field assignments
    increment_fields
        Counter increments
    expected_fields
        Values the stored record must hold for the update to apply
    live_reset_token_at
        If set, the stored reset token must expire after this instant
    """

    set_fields: Mapping[str, Any] = field(default_factory=dict)
    increment_fields: Mapping[str, int] = field(default_factory=dict)
    expected_fields: Mapping[str, Any] = field(default_factory=dict)
    live_reset_token_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        unknown = set(self.set_fields) - SETTABLE_FIELDS
        if unknown:
            msg = f"Fields cannot be updated: {sorted(unknown)}"
            raise ValueError(msg)
        not_counters = set(self.increment_fields) - INCREMENTABLE_FIELDS
        if not_counters:
            msg = f"Fields cannot be incremented: {sorted(not_counters)}"
            raise ValueError(msg)
        not_guards = set(self.expected_fields) - GUARDABLE_FIELDS
        if not_guards:
            msg = f"Fields cannot be guarded: {sorted(not_guards)}"
            raise ValueError(msg)
        if ("reset_token" in self.set_fields) != (
            "reset_token_expires_at" in self.set_fields
        ):
            msg = "reset_token and reset_token_expires_at must be updated together"
            raise ValueError(msg)
        if "updated_at" not in self.set_fields:
            msg = "updated_at must be refreshed on every update"
            raise ValueError(msg)
        object.__setattr__(self, "set_fields", MappingProxyType(dict(self.set_fields)))
        object.__setattr__(
            self, "increment_fields", MappingProxyType(dict(self.increment_fields))
        )
        object.__setattr__(
            self, "expected_fields", MappingProxyType(dict(self.expected_fields))
        )

    @property
    def is_conditional(self) -> bool:
        return bool(self.expected_fields) or self.live_reset_token_at is not None

    def guards_hold(self, record: Mapping[str, Any]) -> bool:
        """Check the guards against a stored record (field name to value)."""
        for key, expected in self.expected_fields.items():
            if record.get(key) != expected:
                return False
        if self.live_reset_token_at is not None:
            expires_at = record.get("reset_token_expires_at")
            if expires_at is None or expires_at <= self.live_reset_token_at:
                return False
        return True

    @classmethod
    def record_login(cls, now: datetime) -> "AccountUpdate":
        return cls(
            set_fields={"last_login_at": now, "updated_at": now},
            increment_fields={"login_count": 1},
        )

    @classmethod
    def upgrade_password_hash(
        cls, password_hash: str, verified_hash: str, now: datetime
    ) -> "AccountUpdate":
        """Re-hash an unchanged password, only if the verified hash is still stored."""
        return cls(
            set_fields={"password_hash": password_hash, "updated_at": now},
            expected_fields={"password_hash": verified_hash},
        )

    @classmethod
    def replace_password(cls, password_hash: str, now: datetime) -> "AccountUpdate":
        return cls(
            set_fields={
                "password_hash": password_hash,
                "password_changed_at": now,
                "updated_at": now,
            }
        )

    @classmethod
    def start_password_reset(
        cls, token_digest: str, expires_at: datetime, now: datetime
    ) -> "AccountUpdate":
        return cls(
            set_fields={
                "reset_token": token_digest,
                "reset_token_expires_at": expires_at,
                "updated_at": now,
            }
        )

    @classmethod
    def clear_password_reset(
        cls, now: datetime, token_digest: Optional[str] = None
    ) -> "AccountUpdate":
        """Clear the reset fields; with ``token_digest``, only if that token is stored."""
        return cls(
            set_fields={
                "reset_token": None,
                "reset_token_expires_at": None,
                "updated_at": now,
            },
            expected_fields=(
                {"reset_token": token_digest} if token_digest is not None else {}
            ),
        )

    @classmethod
    def complete_password_reset(
        cls, password_hash: str, token_digest: str, now: datetime
    ) -> "AccountUpdate":
        """Consume a live reset token and replace the password in one step."""
        return cls(
            set_fields={
                "password_hash": password_hash,
                "password_changed_at": now,
                "reset_token": None,
                "reset_token_expires_at": None,
                "updated_at": now,
            },
            expected_fields={"reset_token": token_digest},
            live_reset_token_at=now,
        )

    @classmethod
    def set_profile_image(
        cls, image: Optional[ProfileImage], now: datetime
    ) -> "AccountUpdate":
        return cls(set_fields={"profile_image": image, "updated_at": now})
