"""Unit tests for the Account aggregate and AccountUpdate."""

from datetime import datetime, timedelta, timezone

import pytest

from userhub_identity.domain.account import (
    Account,
    AccountRole,
    AccountStatus,
    AccountUpdate,
    DuplicateAccountError,
    Gender,
    ProfileImage,
    generate_account_id,
)


def _account(**overrides) -> Account:
    fields = {
        "name": "Jane Doe",
        "user_name": "jane.doe",
        "email": "Jane@Example.com",
        "phone": "9898989898",
        "gender": "Female",
        "password_hash": "$2b$04$hash",
    }
    fields.update(overrides)
    return Account.create(**fields)


class TestAccountCreation:
    """Tests for Account.create."""

    def test_create_defaults(self):
        """Test that a new account is active and counts one login."""
        account = _account()

        assert account.status == AccountStatus.ACTIVE
        assert account.role == AccountRole.USER
        assert account.gender == Gender.FEMALE
        assert account.login_count == 1
        assert account.last_login_at == account.created_at
        assert account.password_changed_at is None
        assert account.reset_token is None
        assert account.is_usable
        assert not account.is_admin

    def test_email_normalized(self):
        assert _account().email == "jane@example.com"

    def test_id_is_twelve_alphanumerics(self):
        account_id = _account().id

        assert len(account_id) == 12
        assert account_id.isalnum()

    def test_generated_ids_differ(self):
        assert len({generate_account_id() for _ in range(100)}) == 100

    def test_invalid_gender_rejected(self):
        with pytest.raises(ValueError):
            _account(gender="Other")


class TestAccountState:
    """Tests for state queries and invariants."""

    def test_reset_fields_must_be_set_together(self):
        with pytest.raises(ValueError, match="set together"):
            Account.reconstitute(**{**_account().to_record(), "reset_token": "abc"})

    def test_live_reset_token(self):
        now = datetime.now(tz=timezone.utc)
        record = _account().to_record()
        record.update(reset_token="abc", reset_token_expires_at=now + timedelta(minutes=5))
        account = Account.reconstitute(**record)

        assert account.has_live_reset_token(now)
        assert not account.has_live_reset_token(now + timedelta(minutes=6))

    def test_naive_datetimes_become_utc(self):
        record = _account().to_record()
        record["created_at"] = datetime(2024, 1, 1, 12, 0)
        account = Account.reconstitute(**record)

        assert account.created_at.tzinfo is not None

    def test_deleted_account_not_usable(self):
        record = {**_account().to_record(), "status": "Deleted"}

        assert not Account.reconstitute(**record).is_usable

    def test_record_round_trip_keeps_identity(self):
        account = _account()

        assert Account.reconstitute(**account.to_record()) == account


class TestPublicView:
    """The external view never exposes credentials."""

    def test_public_dict_hides_credentials(self):
        public = _account().to_public_dict()

        assert "passwordHash" not in public
        assert "password_hash" not in public
        assert not any("reset" in key.lower() for key in public)

    def test_public_dict_uses_camel_case(self):
        image = ProfileImage(key="k1", location="https://img/k1", original_name="me.png")
        public = _account(profile_image=image).to_public_dict()

        assert public["userName"] == "jane.doe"
        assert public["loginCount"] == 1
        assert public["gender"] == "Female"
        assert public["profileImage"] == {
            "key": "k1",
            "location": "https://img/k1",
            "originalName": "me.png",
        }


class TestAccountUpdate:
    """Tests for update construction rules."""

    def setup_method(self):
        self.now = datetime.now(tz=timezone.utc)

    def test_record_login_increments_counter(self):
        update = AccountUpdate.record_login(self.now)

        assert update.increment_fields == {"login_count": 1}
        assert update.set_fields["last_login_at"] == self.now
        assert "password_hash" not in update.set_fields
        assert update.is_conditional is False

    def test_hash_upgrade_guarded_by_verified_hash(self):
        update = AccountUpdate.upgrade_password_hash(
            "$2b$05$new", "$2b$04$old", self.now
        )

        assert update.set_fields["password_hash"] == "$2b$05$new"
        assert update.expected_fields == {"password_hash": "$2b$04$old"}
        assert "password_changed_at" not in update.set_fields

    def test_replace_password_stamps_change_time(self):
        update = AccountUpdate.replace_password("$2b$04$new", self.now)

        assert update.set_fields["password_changed_at"] == self.now

    def test_complete_reset_clears_token(self):
        update = AccountUpdate.complete_password_reset(
            "$2b$04$new", "digest", self.now
        )

        assert update.set_fields["reset_token"] is None
        assert update.set_fields["reset_token_expires_at"] is None

    def test_complete_reset_requires_live_token(self):
        update = AccountUpdate.complete_password_reset(
            "$2b$04$new", "digest", self.now
        )

        assert update.expected_fields == {"reset_token": "digest"}
        assert update.live_reset_token_at == self.now

    def test_clear_reset_guarded_only_with_digest(self):
        assert AccountUpdate.clear_password_reset(self.now).is_conditional is False
        guarded = AccountUpdate.clear_password_reset(self.now, "digest")

        assert guarded.expected_fields == {"reset_token": "digest"}

    def test_guards_hold_checks_expected_values_and_expiry(self):
        update = AccountUpdate.complete_password_reset(
            "$2b$04$new", "digest", self.now
        )
        live = {
            "reset_token": "digest",
            "reset_token_expires_at": self.now + timedelta(minutes=1),
        }

        assert update.guards_hold(live) is True
        assert update.guards_hold({**live, "reset_token": "other"}) is False
        assert update.guards_hold({**live, "reset_token_expires_at": self.now}) is False
        assert update.guards_hold({**live, "reset_token_expires_at": None}) is False

    def test_only_credentials_guardable(self):
        with pytest.raises(ValueError, match="cannot be guarded"):
            AccountUpdate(
                set_fields={"updated_at": self.now},
                expected_fields={"email": "x@example.com"},
            )

    def test_reset_fields_must_change_together(self):
        with pytest.raises(ValueError, match="together"):
            AccountUpdate(set_fields={"reset_token": "abc", "updated_at": self.now})

    def test_updated_at_required(self):
        with pytest.raises(ValueError, match="updated_at"):
            AccountUpdate(set_fields={"status": AccountStatus.INACTIVE})

    def test_identity_fields_not_updatable(self):
        with pytest.raises(ValueError, match="cannot be updated"):
            AccountUpdate(set_fields={"email": "x@example.com", "updated_at": self.now})

    def test_only_login_count_incrementable(self):
        with pytest.raises(ValueError, match="cannot be incremented"):
            AccountUpdate(
                set_fields={"updated_at": self.now},
                increment_fields={"phone": 1},
            )

    def test_update_is_immutable(self):
        update = AccountUpdate.record_login(self.now)

        with pytest.raises(TypeError):
            update.set_fields["status"] = AccountStatus.DELETED


class TestDuplicateAccountError:
    """Conflict messages name the colliding attribute."""

    def test_message_with_value(self):
        error = DuplicateAccountError("phone", "9898989898")

        assert error.field == "phone"
        assert error.message == (
            "Error creating a new user. "
            "A user already exists with this 9898989898 phone number."
        )

    def test_message_without_value(self):
        error = DuplicateAccountError("userName")

        assert error.message == (
            "Error creating a new user. The user name is already taken."
        )
