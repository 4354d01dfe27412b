import logging
from datetime import timedelta
from typing import Optional

from userhub_auth import PasswordHashingService, PasswordPolicy, ResetTokenService
from userhub_identity.application.ports import Mailer
from userhub_identity.domain.account import Account, AccountUpdate, CredentialStore
from userhub_identity.domain.shared import (
    InvalidInputError,
    InvalidOrExpiredTokenError,
    utc_now,
)
from userhub_identity.application.services.email_templates import (
    render_password_reset_email,
)

logger = logging.getLogger(__name__)


class PasswordResetService:
    """Service for handling password reset requests and token validation.

    The plaintext token only ever leaves the process inside the emailed
    link; the account stores its digest and expiry. Requesting a new reset
    overwrites any outstanding token, so at most one is live per account.
    Consuming a token is a conditional write on its digest and expiry, so a
    token sets at most one password even under concurrent requests.
    """

    TOKEN_EXPIRY_MINUTES = 10

    def __init__(  # noqa: PLR0913
        self,
        credential_store: CredentialStore,
        reset_token_service: ResetTokenService,
        password_service: PasswordHashingService,
        password_policy: PasswordPolicy,
        mailer: Mailer,
        reset_link_base: str,
        token_expiry_minutes: int = TOKEN_EXPIRY_MINUTES,
    ):
        self._store = credential_store
        self._token_service = reset_token_service
        self._password_service = password_service
        self._policy = password_policy
        self._mailer = mailer
        self._reset_link_base = reset_link_base.rstrip("/")
        self._expiry = timedelta(minutes=token_expiry_minutes)

    async def request_reset(self, email: Optional[str]) -> bool:
        """Start a password reset and email the link to the account owner.

        Returns ``False`` without side effects if no usable account has the
        email. If the email cannot be sent the reset token is cleared again
        and the delivery error propagates.
        """
        normalized = (email or "").strip().lower()
        if not normalized:
            return False

        account = await self._store.find_by_email(normalized)
        if account is None or not account.is_usable:
            # Silent fail to prevent email enumeration
            logger.debug("Password reset requested for unknown email")
            return False

        raw_token, digest = self._token_service.generate()
        now = utc_now()
        updated = await self._store.update_fields(
            account.id,
            AccountUpdate.start_password_reset(digest, now + self._expiry, now),
        )
        if updated is None:
            return False

        subject, html_body = render_password_reset_email(
            name=updated.name,
            reset_link=f"{self._reset_link_base}/{raw_token}",
            expire_minutes=int(self._expiry.total_seconds() // 60),
        )
        try:
            self._mailer.send(updated.email, subject, html_body)
        except Exception:
            logger.error(
                "Failed to send password reset email for account %s, "
                "clearing reset token",
                updated.id,
            )
            await self._clear_reset_token(updated.id, digest)
            raise

        logger.info("Password reset email sent for account %s", updated.id)
        return True

    async def _clear_reset_token(self, account_id: str, digest: str) -> None:
        # Only clears the token this request stored; a newer one survives.
        try:
            await self._store.update_fields(
                account_id, AccountUpdate.clear_password_reset(utc_now(), digest)
            )
        except Exception:
            logger.exception(
                "Failed to clear reset token of account %s after failed email",
                account_id,
            )

    async def reset_password(
        self, token: Optional[str], new_password: Optional[str]
    ) -> Account:
        """Set a new password using a live reset token and consume the token.

        Raises
        ------
        InvalidInputError
            If the new password breaks the policy
        InvalidOrExpiredTokenError
            If the token is unknown, already used, or past its expiry
        """
        message = self._policy.validate(new_password)
        if message:
            raise InvalidInputError(message)
        if not token:
            raise InvalidOrExpiredTokenError

        digest = self._token_service.digest(token)
        account = await self._store.find_by_reset_digest(digest, utc_now())
        if account is None or not account.is_usable:
            raise InvalidOrExpiredTokenError

        new_hash = self._password_service.hash(new_password or "")
        updated = await self._store.update_fields(
            account.id,
            AccountUpdate.complete_password_reset(new_hash, digest, utc_now()),
        )
        if updated is None:
            logger.info(
                "Reset token of account %s was consumed or expired concurrently",
                account.id,
            )
            raise InvalidOrExpiredTokenError

        logger.info("Password reset completed for account %s", account.id)
        return updated
