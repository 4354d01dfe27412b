"""Unit tests for AuthenticationService."""

from unittest.mock import AsyncMock, Mock

import pytest

from userhub_auth import (
    ExpiredTokenError,
    InvalidTokenError,
    JWTService,
    PasswordHashingService,
    PasswordPolicy,
    TokenError,
)
from userhub_auth.schemas import TokenPayload
from userhub_identity.application.services import AuthenticationService
from userhub_identity.application.services.authentication_service import (
    ACCOUNT_DELETED,
    ACCOUNT_GONE,
    INCORRECT_CURRENT_PASSWORD,
    INVALID_CREDENTIALS,
    MISSING_CONFIRM_PASSWORD,
    MISSING_CURRENT_PASSWORD,
    MISSING_NEW_PASSWORD,
    NOT_AUTHENTICATED,
    NOT_LOGGED_IN,
    PASSWORDS_DO_NOT_MATCH,
    TOKEN_EXPIRED,
)
from userhub_identity.domain.account import (
    Account,
    AccountNotFoundError,
    AccountStatus,
    DuplicateAccountError,
    NewAccountRequest,
    ProfileImage,
)
from userhub_identity.domain.shared import (
    ErrorCode,
    InvalidInputError,
    UnauthorizedError,
)

TEST_EMAIL = "jane@example.com"
TEST_PASSWORD = "Password1!"
TEST_HASH = "$2b$04$" + "a" * 53
TEST_TOKEN = "signed.jwt.token"


def _registration(**overrides) -> NewAccountRequest:
    fields = {
        "name": "Jane Doe",
        "userName": "jane.doe",
        "gender": "Female",
        "email": TEST_EMAIL,
        "phone": "9898989898",
        "password": TEST_PASSWORD,
    }
    fields.update(overrides)
    return NewAccountRequest.from_mapping(fields)


def _account(**overrides) -> Account:
    fields = {
        "name": "Jane Doe",
        "user_name": "jane.doe",
        "email": TEST_EMAIL,
        "phone": "9898989898",
        "gender": "Female",
        "password_hash": TEST_HASH,
    }
    fields.update(overrides)
    return Account.create(**fields)


class _ServiceTestBase:
    def setup_method(self):
        """Set up test fixtures."""
        self.store = AsyncMock()
        self.store.find_conflicting.return_value = None
        self.store.insert.side_effect = lambda account: account
        self.password_service = Mock(spec=PasswordHashingService)
        self.password_service.hash.return_value = TEST_HASH
        self.password_service.verify.return_value = True
        self.password_service.needs_rehash.return_value = False
        self.jwt_service = Mock(spec=JWTService)
        self.jwt_service.create_access_token.return_value = TEST_TOKEN
        self.image_store = Mock()
        self.service = AuthenticationService(
            credential_store=self.store,
            password_service=self.password_service,
            password_policy=PasswordPolicy(),
            jwt_service=self.jwt_service,
            image_store=self.image_store,
        )


class TestRegister(_ServiceTestBase):
    """Tests for registration."""

    @pytest.mark.asyncio
    async def test_register_success(self):
        """Test that a valid registration stores the account and signs it in."""
        token, account = await self.service.register(_registration())

        assert token == TEST_TOKEN
        assert account.email == TEST_EMAIL
        assert account.password_hash == TEST_HASH
        assert account.login_count == 1
        self.password_service.hash.assert_called_once_with(TEST_PASSWORD)
        self.store.insert.assert_awaited_once()
        self.jwt_service.create_access_token.assert_called_once_with(
            account_id=account.id,
            email=TEST_EMAIL,
        )

    @pytest.mark.asyncio
    async def test_invalid_input_reports_first_message(self):
        with pytest.raises(InvalidInputError) as exc_info:
            await self.service.register(_registration(name="", phone="1"))

        assert exc_info.value.message == "Name can't be blank"
        self.store.find_conflicting.assert_not_awaited()
        self.store.insert.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_conflict_prefers_user_name(self):
        """Test that a record matching every field is reported as userName."""
        self.store.find_conflicting.return_value = _account()

        with pytest.raises(DuplicateAccountError) as exc_info:
            await self.service.register(_registration())

        assert exc_info.value.field == "userName"
        self.store.insert.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_conflict_on_phone(self):
        self.store.find_conflicting.return_value = _account(
            user_name="someone.else",
            email="else@example.com",
        )

        with pytest.raises(DuplicateAccountError) as exc_info:
            await self.service.register(_registration())

        assert exc_info.value.field == "phone"
        assert "9898989898 phone number" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_conflict_on_email(self):
        self.store.find_conflicting.return_value = _account(
            user_name="someone.else",
            phone="1111111111",
        )

        with pytest.raises(DuplicateAccountError) as exc_info:
            await self.service.register(_registration())

        assert exc_info.value.field == "email"

    @pytest.mark.asyncio
    async def test_token_failure_removes_account(self):
        """Test that no account survives a failed token issuance."""
        self.jwt_service.create_access_token.side_effect = TokenError("no key")

        with pytest.raises(TokenError):
            await self.service.register(_registration())

        inserted = self.store.insert.call_args.args[0]
        self.store.delete_by_id.assert_awaited_once_with(inserted.id)

    @pytest.mark.asyncio
    async def test_compensation_failure_keeps_original_error(self):
        self.jwt_service.create_access_token.side_effect = TokenError("no key")
        self.store.delete_by_id.side_effect = RuntimeError("store down")

        with pytest.raises(TokenError):
            await self.service.register(_registration())

    @pytest.mark.asyncio
    async def test_failed_registration_discards_uploaded_image(self):
        request = _registration(
            profileImage={"key": "img-1", "location": "https://img/1"},
            email="broken",
        )

        with pytest.raises(InvalidInputError):
            await self.service.register(request)

        self.image_store.delete.assert_called_once_with("img-1")

    @pytest.mark.asyncio
    async def test_image_discard_failure_is_not_raised(self):
        self.store.find_conflicting.return_value = _account()
        self.image_store.delete.side_effect = RuntimeError("s3 down")
        request = _registration(profileImage={"key": "img-1", "location": ""})

        with pytest.raises(DuplicateAccountError):
            await self.service.register(request)

    @pytest.mark.asyncio
    async def test_successful_registration_keeps_image(self):
        request = _registration(profileImage={"key": "img-1", "location": ""})

        _, account = await self.service.register(request)

        assert account.profile_image == ProfileImage(key="img-1", location="")
        self.image_store.delete.assert_not_called()


class TestLogin(_ServiceTestBase):
    """Tests for login."""

    def setup_method(self):
        super().setup_method()
        self.account = _account()
        self.store.find_by_email.return_value = self.account
        self.store.update_fields.side_effect = lambda account_id, changes: self.account

    @pytest.mark.asyncio
    async def test_login_success_records_login(self):
        token, account = await self.service.login(" Jane@Example.com ", TEST_PASSWORD)

        assert token == TEST_TOKEN
        assert account is self.account
        self.store.find_by_email.assert_awaited_once_with(TEST_EMAIL)
        changes = self.store.update_fields.call_args.args[1]
        assert changes.increment_fields == {"login_count": 1}
        assert "password_hash" not in changes.set_fields

    @pytest.mark.asyncio
    async def test_login_upgrades_outdated_hash(self):
        self.password_service.needs_rehash.return_value = True
        self.password_service.hash.return_value = "$2b$05$upgraded"

        await self.service.login(TEST_EMAIL, TEST_PASSWORD)

        assert self.store.update_fields.await_count == 2
        login_changes = self.store.update_fields.call_args_list[0].args[1]
        assert "password_hash" not in login_changes.set_fields
        upgrade = self.store.update_fields.call_args_list[1].args[1]
        assert upgrade.set_fields["password_hash"] == "$2b$05$upgraded"
        assert upgrade.expected_fields == {"password_hash": TEST_HASH}

    @pytest.mark.asyncio
    async def test_hash_upgrade_skipped_when_password_changed_meanwhile(self):
        """Test that a missed upgrade guard keeps the recorded login."""
        self.password_service.needs_rehash.return_value = True
        self.password_service.hash.return_value = "$2b$05$upgraded"
        recorded = _account()
        self.store.update_fields.side_effect = [recorded, None]

        token, account = await self.service.login(TEST_EMAIL, TEST_PASSWORD)

        assert token == TEST_TOKEN
        assert account is recorded
        assert account.password_hash == TEST_HASH

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("email", "password"),
        [("", TEST_PASSWORD), (TEST_EMAIL, ""), (None, None)],
    )
    async def test_missing_credentials(self, email, password):
        with pytest.raises(UnauthorizedError) as exc_info:
            await self.service.login(email, password)

        assert exc_info.value.message == INVALID_CREDENTIALS
        self.store.find_by_email.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_email_and_wrong_password_look_alike(self):
        """Test that callers cannot tell which half was wrong."""
        self.store.find_by_email.return_value = None
        with pytest.raises(UnauthorizedError) as unknown:
            await self.service.login("nobody@example.com", TEST_PASSWORD)

        self.store.find_by_email.return_value = self.account
        self.password_service.verify.return_value = False
        with pytest.raises(UnauthorizedError) as wrong:
            await self.service.login(TEST_EMAIL, "Wrong1!xx")

        assert unknown.value.message == wrong.value.message == INVALID_CREDENTIALS
        self.store.update_fields.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_deleted_account_cannot_login(self):
        record = {**self.account.to_record(), "status": AccountStatus.DELETED}
        self.store.find_by_email.return_value = Account.reconstitute(**record)

        with pytest.raises(UnauthorizedError) as exc_info:
            await self.service.login(TEST_EMAIL, TEST_PASSWORD)

        assert exc_info.value.message == INVALID_CREDENTIALS
        self.password_service.verify.assert_not_called()

    @pytest.mark.asyncio
    async def test_account_removed_during_login(self):
        self.store.update_fields.side_effect = None
        self.store.update_fields.return_value = None

        with pytest.raises(UnauthorizedError):
            await self.service.login(TEST_EMAIL, TEST_PASSWORD)

        self.jwt_service.create_access_token.assert_not_called()


class TestChangePassword(_ServiceTestBase):
    """Tests for changing the password."""

    def setup_method(self):
        super().setup_method()
        self.account = _account()
        self.store.find_by_id.return_value = self.account
        self.store.update_fields.side_effect = lambda account_id, changes: self.account

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("current", "new", "confirm", "expected"),
        [
            ("", "", "", MISSING_CURRENT_PASSWORD),
            (TEST_PASSWORD, None, "x", MISSING_NEW_PASSWORD),
            (TEST_PASSWORD, "NewPass1!", "", MISSING_CONFIRM_PASSWORD),
            (TEST_PASSWORD, "NewPass1!", "NewPass2!", PASSWORDS_DO_NOT_MATCH),
            (TEST_PASSWORD, "newpass1!", "newpass1!", "Password must contain an upper case letter"),
        ],
    )
    async def test_input_checked_before_lookup(self, current, new, confirm, expected):
        with pytest.raises(InvalidInputError) as exc_info:
            await self.service.change_password(self.account.id, current, new, confirm)

        assert exc_info.value.message == expected
        self.store.find_by_id.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_wrong_current_password(self):
        self.password_service.verify.return_value = False

        with pytest.raises(UnauthorizedError) as exc_info:
            await self.service.change_password(
                self.account.id, "Wrong1!xx", "NewPass1!", "NewPass1!"
            )

        assert exc_info.value.message == INCORRECT_CURRENT_PASSWORD
        self.store.update_fields.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_account(self):
        self.store.find_by_id.return_value = None

        with pytest.raises(AccountNotFoundError):
            await self.service.change_password(
                "missing", TEST_PASSWORD, "NewPass1!", "NewPass1!"
            )

    @pytest.mark.asyncio
    async def test_change_password_success(self):
        self.password_service.hash.return_value = "$2b$04$new"

        await self.service.change_password(
            self.account.id, TEST_PASSWORD, "NewPass1!", "NewPass1!"
        )

        self.password_service.verify.assert_called_once_with(TEST_PASSWORD, TEST_HASH)
        self.password_service.hash.assert_called_once_with("NewPass1!")
        account_id, changes = self.store.update_fields.call_args.args
        assert account_id == self.account.id
        assert changes.set_fields["password_hash"] == "$2b$04$new"
        assert changes.set_fields["password_changed_at"] is not None


class TestUpdateProfileImage(_ServiceTestBase):
    """Tests for replacing the profile image reference."""

    @pytest.mark.asyncio
    async def test_update_image(self):
        account = _account()
        self.store.update_fields.return_value = account
        image = ProfileImage(key="img-2", location="https://img/2")

        result = await self.service.update_profile_image(account.id, image)

        assert result is account
        changes = self.store.update_fields.call_args.args[1]
        assert changes.set_fields["profile_image"] == image

    @pytest.mark.asyncio
    async def test_missing_account_discards_image(self):
        self.store.update_fields.return_value = None
        image = ProfileImage(key="img-2", location="")

        with pytest.raises(AccountNotFoundError):
            await self.service.update_profile_image("missing", image)

        self.image_store.delete.assert_called_once_with("img-2")


class TestAuthenticate(_ServiceTestBase):
    """Tests for resolving access tokens."""

    def setup_method(self):
        super().setup_method()
        self.account = _account()
        self.jwt_service.verify_token.return_value = TokenPayload(
            account_id=self.account.id,
            email=TEST_EMAIL,
            exp=self.account.created_at,
        )
        self.store.find_by_id.return_value = self.account

    @pytest.mark.asyncio
    async def test_valid_token(self):
        assert await self.service.authenticate(TEST_TOKEN) is self.account
        self.store.find_by_id.assert_awaited_once_with(self.account.id)

    @pytest.mark.asyncio
    async def test_missing_token(self):
        with pytest.raises(UnauthorizedError) as exc_info:
            await self.service.authenticate(None)

        assert exc_info.value.message == NOT_LOGGED_IN

    @pytest.mark.asyncio
    async def test_expired_token(self):
        self.jwt_service.verify_token.side_effect = ExpiredTokenError()

        with pytest.raises(UnauthorizedError) as exc_info:
            await self.service.authenticate(TEST_TOKEN)

        assert exc_info.value.message == TOKEN_EXPIRED
        assert exc_info.value.code == ErrorCode.TOKEN_EXPIRED

    @pytest.mark.asyncio
    async def test_invalid_token(self):
        self.jwt_service.verify_token.side_effect = InvalidTokenError()

        with pytest.raises(UnauthorizedError) as exc_info:
            await self.service.authenticate(TEST_TOKEN)

        assert exc_info.value.message == NOT_AUTHENTICATED

    @pytest.mark.asyncio
    async def test_missing_secret_is_not_a_user_error(self):
        self.jwt_service.verify_token.side_effect = TokenError("no key")

        with pytest.raises(TokenError):
            await self.service.authenticate(TEST_TOKEN)

    @pytest.mark.asyncio
    async def test_account_gone(self):
        self.store.find_by_id.return_value = None

        with pytest.raises(UnauthorizedError) as exc_info:
            await self.service.authenticate(TEST_TOKEN)

        assert exc_info.value.message == ACCOUNT_GONE

    @pytest.mark.asyncio
    async def test_account_deleted(self):
        record = {**self.account.to_record(), "status": AccountStatus.DELETED}
        self.store.find_by_id.return_value = Account.reconstitute(**record)

        with pytest.raises(UnauthorizedError) as exc_info:
            await self.service.authenticate(TEST_TOKEN)

        assert exc_info.value.message == ACCOUNT_DELETED
