"""Password hashing service using bcrypt.

The cost factor is configuration: it is handed to the service when it is
built (and may be overridden per call), never stored on the account type.
"""

import re

import bcrypt

from userhub_auth.exceptions import HashingError

# $2b$12$ + 22 chars of salt + 31 chars of checksum
_BCRYPT_HASH_RE = re.compile(r"^\$2[abxy]?\$(\d{2})\$[./A-Za-z0-9]{53}$")

# bcrypt only looks at the first 72 bytes of a password
_BCRYPT_MAX_PASSWORD_BYTES = 72


class PasswordHashingService:
    """Service for one-way password hashing and verification.

    Examples
    --------
    >>> service = PasswordHashingService(rounds=4)
    >>> password_hash = service.hash("Password1!")
    >>> service.verify("Password1!", password_hash)
    True
    >>> service.verify("wrong", password_hash)
    False
    """

    MIN_ROUNDS = 4
    MAX_ROUNDS = 31
    DEFAULT_ROUNDS = 12

    def __init__(self, rounds: int = DEFAULT_ROUNDS):
        """Initialize the password hashing service.

        Parameters
        ----------
        rounds
            The bcrypt work factor (log2 of iterations). Higher values are
            more secure but slower. Validated when a hash is produced.
        """
        self._rounds = rounds

    @property
    def rounds(self) -> int:
        return self._rounds

    def hash(self, password: str, rounds: int | None = None) -> str:
        """Hash a plaintext password.

        Parameters
        ----------
        password
            The plaintext password to hash
        rounds
            Cost factor for this call; defaults to the configured one

        Returns
        -------
        The bcrypt hash as a string

        Raises
        ------
        HashingError
            If the cost factor is out of range or hashing fails
        """
        cost = self._rounds if rounds is None else rounds
        if not isinstance(cost, int) or not (
            self.MIN_ROUNDS <= cost <= self.MAX_ROUNDS
        ):
            msg = (
                f"Invalid cost factor {cost!r}: must be an integer between "
                f"{self.MIN_ROUNDS} and {self.MAX_ROUNDS}"
            )
            raise HashingError(msg)

        password_bytes = password.encode("utf-8")
        if len(password_bytes) > _BCRYPT_MAX_PASSWORD_BYTES:
            msg = f"Password exceeds {_BCRYPT_MAX_PASSWORD_BYTES} bytes"
            raise HashingError(msg)

        try:
            salt = bcrypt.gensalt(rounds=cost)
            hashed = bcrypt.hashpw(password_bytes, salt)
        except (ValueError, TypeError) as e:
            msg = f"Password hashing failed: {e}"
            raise HashingError(msg) from e
        return hashed.decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Verify a password against a hash.

        A mismatch is reported as ``False``; only a malformed hash raises.

        Raises
        ------
        HashingError
            If ``password_hash`` is not a bcrypt hash
        """
        if not isinstance(password_hash, str) or not _BCRYPT_HASH_RE.match(
            password_hash,
        ):
            msg = "Stored password hash is malformed"
            raise HashingError(msg)

        password_bytes = password.encode("utf-8")
        if len(password_bytes) > _BCRYPT_MAX_PASSWORD_BYTES:
            # Such a password can never have been hashed by this service
            return False

        try:
            return bcrypt.checkpw(password_bytes, password_hash.encode("utf-8"))
        except (ValueError, TypeError) as e:
            msg = f"Password verification failed: {e}"
            raise HashingError(msg) from e

    def needs_rehash(self, password_hash: str, rounds: int | None = None) -> bool:
        """Check if a password hash was produced with a different cost factor.

        Used to upgrade stored hashes on the next successful login after the
        configured cost factor changes.
        """
        cost = self._rounds if rounds is None else rounds
        match = _BCRYPT_HASH_RE.match(password_hash or "")
        if match is None:
            return True
        return int(match.group(1)) != cost
