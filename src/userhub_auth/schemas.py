"""Auth schemas and data structures."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class TokenPayload:
    """Decoded JWT token payload.

    Attributes
    ----------
    account_id
        The identifier of the account the token was issued for (``id`` claim)
    email
        The account's email address (``email`` claim)
    exp
        Token expiration timestamp
    issued_at
        Token issue timestamp
    """

    account_id: str
    email: str
    exp: datetime
    issued_at: datetime | None = None

    def is_expired(self) -> bool:
        """Check if the token has expired."""
        return datetime.now(tz=self.exp.tzinfo) > self.exp
