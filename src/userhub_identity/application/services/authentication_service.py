"""Authentication service for account registration, login and credentials."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from userhub_auth import (
    ExpiredTokenError,
    InvalidTokenError,
    JWTService,
    PasswordHashingService,
    PasswordPolicy,
)
from userhub_identity.domain.account import (
    Account,
    AccountNotFoundError,
    AccountUpdate,
    DuplicateAccountError,
    NewAccountRequest,
    ProfileImage,
    validate_new_account,
)
from userhub_identity.domain.shared import (
    ErrorCode,
    InvalidInputError,
    UnauthorizedError,
    utc_now,
)

if TYPE_CHECKING:
    from userhub_identity.application.ports import ImageStore
    from userhub_identity.domain.account import CredentialStore

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Email or Password incorrect. Check your Login credentials."
INCORRECT_CURRENT_PASSWORD = "Current password is incorrect."

MISSING_CURRENT_PASSWORD = "Please Enter current password."
MISSING_NEW_PASSWORD = "Please Enter New Password."
MISSING_CONFIRM_PASSWORD = "Please Enter confirm new password."
PASSWORDS_DO_NOT_MATCH = (
    "The 'New Password' and 'Confirm New Password' are not match"
)

NOT_LOGGED_IN = "You are not logged in! Login to get access."
TOKEN_EXPIRED = "Token Expired! Login to get access."
NOT_AUTHENTICATED = "You are not authenticated!"
ACCOUNT_GONE = "The user belonging to this token does no longer exist."
ACCOUNT_DELETED = "The user belonging to this token has been deleted."


class AuthenticationService:
    """
    Application service for account authentication.

    Orchestrates userhub_auth primitives (password hashing, password policy,
    JWT tokens) with the Account domain to provide:
    - Registration
    - Login with password
    - Password change
    - Profile image update
    - Access token authentication

    Every flow is a short saga over the credential store. Failures after an
    account was inserted are compensated by deleting it again; uploaded
    images of failed registrations are removed from the image store.
    """

    def __init__(  # noqa: PLR0913
        self,
        credential_store: CredentialStore,
        password_service: PasswordHashingService,
        password_policy: PasswordPolicy,
        jwt_service: JWTService,
        image_store: Optional[ImageStore] = None,
    ):
        self._store = credential_store
        self._password_service = password_service
        self._policy = password_policy
        self._jwt_service = jwt_service
        self._image_store = image_store

    def _issue_token(self, account: Account) -> str:
        return self._jwt_service.create_access_token(
            account_id=account.id,
            email=account.email,
        )

    async def register(self, request: NewAccountRequest) -> tuple[str, Account]:
        """Create an account and sign it in.

        Returns
        -------
        The access token and the stored account

        Raises
        ------
        InvalidInputError
            With the first failing validation message
        DuplicateAccountError
            If the user name, phone or email is already taken
        """
        try:
            return await self._register(request)
        except Exception:
            self._discard_image(request.profile_image)
            raise

    async def _register(self, request: NewAccountRequest) -> tuple[str, Account]:
        message = validate_new_account(request, self._policy)
        if message:
            raise InvalidInputError(message)

        # validation guarantees these are present
        user_name = request.user_name or ""
        phone = request.phone or ""
        email = request.email or ""
        password = request.password or ""

        existing = await self._store.find_conflicting(
            user_name=user_name, phone=phone, email=email
        )
        if existing is not None:
            field, value = _conflicting_field(existing, user_name, phone, email)
            logger.info("Registration rejected, %s already taken", field)
            raise DuplicateAccountError(field, value)

        password_hash = self._password_service.hash(password)
        account = Account.create(
            name=request.name or "",
            user_name=user_name,
            email=email,
            phone=phone,
            gender=request.gender or "",
            password_hash=password_hash,
            profile_image=request.profile_image,
        )
        account = await self._store.insert(account)

        try:
            token = self._issue_token(account)
        except Exception:
            logger.error(
                "Token issuance failed for new account %s, removing it",
                account.id,
            )
            await self._remove_orphan(account.id)
            raise

        logger.info("Account registered: %s", account.email)
        return token, account

    async def _remove_orphan(self, account_id: str) -> None:
        try:
            await self._store.delete_by_id(account_id)
        except Exception:
            logger.exception(
                "Failed to remove account %s after failed registration", account_id
            )

    def _discard_image(self, image: Optional[ProfileImage]) -> None:
        if image is None or self._image_store is None:
            return
        try:
            self._image_store.delete(image.key)
            logger.info("Removed uploaded profile image %s", image.key)
        except Exception:
            logger.warning(
                "Failed to remove uploaded profile image %s", image.key, exc_info=True
            )

    async def login(
        self,
        email: Optional[str],
        password: Optional[str],
    ) -> tuple[str, Account]:
        """Verify credentials, record the login and issue an access token.

        Unknown email, unusable account and wrong password all raise the
        same ``UnauthorizedError`` so callers cannot enumerate accounts.
        """
        normalized = (email or "").strip().lower()
        if not normalized or not password:
            raise UnauthorizedError(INVALID_CREDENTIALS)

        account = await self._store.find_by_email(normalized)
        if account is None:
            logger.warning("Login failed, unknown email")
            raise UnauthorizedError(INVALID_CREDENTIALS)
        if not account.is_usable:
            logger.warning("Login rejected for deleted account %s", account.id)
            raise UnauthorizedError(INVALID_CREDENTIALS)
        if not self._password_service.verify(password, account.password_hash):
            logger.warning("Login failed, wrong password for account %s", account.id)
            raise UnauthorizedError(INVALID_CREDENTIALS)

        updated = await self._store.update_fields(
            account.id, AccountUpdate.record_login(utc_now())
        )
        if updated is None:
            raise UnauthorizedError(INVALID_CREDENTIALS)

        if self._password_service.needs_rehash(account.password_hash):
            updated = await self._upgrade_password_hash(updated, account, password)

        token = self._issue_token(updated)
        logger.info("Account logged in: %s", updated.email)
        return token, updated

    async def _upgrade_password_hash(
        self, current: Account, verified: Account, password: str
    ) -> Account:
        """Re-hash the verified password at the current cost.

        The write only lands if the stored hash is still the one the password
        was checked against; otherwise ``current`` is returned unchanged.
        """
        new_hash = self._password_service.hash(password)
        upgraded = await self._store.update_fields(
            verified.id,
            AccountUpdate.upgrade_password_hash(
                new_hash, verified.password_hash, utc_now()
            ),
        )
        if upgraded is None:
            logger.info(
                "Skipped password hash upgrade, password of account %s changed",
                verified.id,
            )
            return current
        logger.info("Upgraded password hash of account %s", verified.id)
        return upgraded

    async def change_password(
        self,
        account_id: str,
        current_password: Optional[str],
        new_password: Optional[str],
        confirm_new_password: Optional[str],
    ) -> Account:
        """Replace the password of an authenticated account.

        Raises
        ------
        InvalidInputError
            If a field is missing, the new passwords differ, or the new
            password breaks the policy
        UnauthorizedError
            If the current password is wrong
        AccountNotFoundError
            If the account no longer exists
        """
        if not current_password:
            raise InvalidInputError(MISSING_CURRENT_PASSWORD)
        if not new_password:
            raise InvalidInputError(MISSING_NEW_PASSWORD)
        if not confirm_new_password:
            raise InvalidInputError(MISSING_CONFIRM_PASSWORD)
        if new_password != confirm_new_password:
            raise InvalidInputError(PASSWORDS_DO_NOT_MATCH)

        message = self._policy.validate(new_password)
        if message:
            raise InvalidInputError(message)

        account = await self._store.find_by_id(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        if not self._password_service.verify(current_password, account.password_hash):
            logger.warning("Password change rejected for account %s", account_id)
            raise UnauthorizedError(INCORRECT_CURRENT_PASSWORD)

        new_hash = self._password_service.hash(new_password)
        updated = await self._store.update_fields(
            account_id, AccountUpdate.replace_password(new_hash, utc_now())
        )
        if updated is None:
            raise AccountNotFoundError(account_id)

        logger.info("Password changed for account %s", account_id)
        return updated

    async def update_profile_image(
        self,
        account_id: str,
        image: Optional[ProfileImage],
    ) -> Account:
        """Point the account at a new profile image (last write wins)."""
        updated = await self._store.update_fields(
            account_id, AccountUpdate.set_profile_image(image, utc_now())
        )
        if updated is None:
            self._discard_image(image)
            raise AccountNotFoundError(account_id)
        logger.info("Profile image updated for account %s", account_id)
        return updated

    async def authenticate(self, token: Optional[str]) -> Account:
        """Resolve an access token to a usable account.

        Raises
        ------
        UnauthorizedError
            With a message telling whether the token was missing, expired,
            invalid, or belongs to a missing or deleted account
        """
        if not token:
            raise UnauthorizedError(NOT_LOGGED_IN)

        try:
            payload = self._jwt_service.verify_token(token)
        except ExpiredTokenError as e:
            raise UnauthorizedError(TOKEN_EXPIRED, code=ErrorCode.TOKEN_EXPIRED) from e
        except InvalidTokenError as e:
            logger.debug("Rejected access token: %s", e)
            raise UnauthorizedError(NOT_AUTHENTICATED) from e

        account = await self._store.find_by_id(payload.account_id)
        if account is None:
            raise UnauthorizedError(ACCOUNT_GONE)
        if not account.is_usable:
            raise UnauthorizedError(ACCOUNT_DELETED)
        return account


def _conflicting_field(
    existing: Account, user_name: str, phone: str, email: str
) -> tuple[str, str]:
    """Name the field that collides with ``existing``: userName, then phone, then email."""
    if existing.user_name == user_name:
        return "userName", user_name
    if existing.phone == phone:
        return "phone", phone
    return "email", email
