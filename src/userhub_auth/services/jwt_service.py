"""JWT token service.

Issues and verifies the signed access tokens handed to clients after
registration and login. Tokens carry the account's ``id`` and ``email``.
"""

from datetime import datetime, timedelta, timezone

import jwt

from userhub_auth.exceptions import ExpiredTokenError, InvalidTokenError, TokenError
from userhub_auth.schemas import TokenPayload


class JWTService:
    """Service for JWT token creation and verification.

    Examples
    --------
    >>> service = JWTService(secret_key="your-secret-key")
    >>> token = service.create_access_token("a1B2c3D4e5F6", "user@example.com")
    >>> payload = service.verify_token(token)
    >>> print(payload.account_id)
    a1B2c3D4e5F6
    """

    DEFAULT_ACCESS_EXPIRE_HOURS = 24
    ALGORITHM = "HS256"

    def __init__(
        self,
        secret_key: str,
        access_token_expire_hours: int = DEFAULT_ACCESS_EXPIRE_HOURS,
    ):
        """Initialize the JWT service.

        Parameters
        ----------
        secret_key
            Secret key for signing tokens. An empty key is accepted here and
            rejected when a token is issued or verified.
        access_token_expire_hours
            Hours until an access token expires (default 24)
        """
        self._secret_key = secret_key
        self._access_expire = timedelta(hours=access_token_expire_hours)

    @property
    def access_token_ttl(self) -> timedelta:
        return self._access_expire

    def create_access_token(
        self,
        account_id: str,
        email: str,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create a signed access token.

        Parameters
        ----------
        account_id
            The account's unique identifier
        email
            The account's email address
        expires_delta
            Custom time to live (optional)

        Returns
        -------
        The encoded JWT token string

        Raises
        ------
        TokenError
            If the signing key is missing or the token cannot be encoded
        """
        self._require_secret()

        now = datetime.now(tz=timezone.utc)
        payload = {
            "id": str(account_id),
            "email": email,
            "iat": now,
            "exp": now + (expires_delta or self._access_expire),
        }

        try:
            return jwt.encode(payload, self._secret_key, algorithm=self.ALGORITHM)
        except (jwt.PyJWTError, TypeError, ValueError) as e:
            msg = f"Error generating JWT token: {e}"
            raise TokenError(msg) from e

    def verify_token(self, token: str) -> TokenPayload:
        """Verify and decode a JWT token.

        Raises
        ------
        ExpiredTokenError
            If the signature is valid but the token is past its expiry
        InvalidTokenError
            If the token is malformed, tampered with, or signed by another key
        TokenError
            If the signing key is missing
        """
        self._require_secret()

        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.ALGORITHM],
                options={"require": ["exp", "iat"]},
            )

            issued_at = payload.get("iat")
            return TokenPayload(
                account_id=str(payload["id"]),
                email=payload["email"],
                exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
                issued_at=(
                    datetime.fromtimestamp(issued_at, tz=timezone.utc)
                    if issued_at is not None
                    else None
                ),
            )

        except jwt.ExpiredSignatureError as e:
            raise ExpiredTokenError from e
        except jwt.InvalidTokenError as e:
            msg = f"Invalid token: {e}"
            raise InvalidTokenError(msg) from e
        except (KeyError, TypeError, ValueError) as e:
            msg = f"Malformed token payload: {e}"
            raise InvalidTokenError(msg) from e

    def _require_secret(self) -> None:
        if not self._secret_key:
            msg = "JWT secret key is not configured"
            raise TokenError(msg)
