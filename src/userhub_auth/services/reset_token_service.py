"""Password reset token generation.

The plaintext token travels to the user once (inside the reset link); only
its digest is ever stored, so a leaked store does not hand out usable
tokens.
"""

import hashlib
import secrets

from userhub_auth.exceptions import TokenError


class ResetTokenService:
    """Generates opaque reset tokens and their deterministic digests.

    Parameters
    ----------
    digest_algorithm
        Any algorithm name accepted by :func:`hashlib.new`.
    token_bytes
        Bytes of randomness per token (hex encoded, so the token is twice as
        long).
    """

    DEFAULT_DIGEST_ALGORITHM = "sha256"
    DEFAULT_TOKEN_BYTES = 32

    def __init__(
        self,
        digest_algorithm: str = DEFAULT_DIGEST_ALGORITHM,
        token_bytes: int = DEFAULT_TOKEN_BYTES,
    ):
        # shake_* digests need an explicit length and are not supported
        if (
            digest_algorithm not in hashlib.algorithms_available
            or digest_algorithm.startswith("shake")
        ):
            msg = f"Unsupported reset token digest algorithm: {digest_algorithm}"
            raise TokenError(msg)
        if token_bytes < self.DEFAULT_TOKEN_BYTES:
            msg = f"Reset tokens need at least {self.DEFAULT_TOKEN_BYTES} bytes"
            raise TokenError(msg)
        self._algorithm = digest_algorithm
        self._token_bytes = token_bytes

    def generate(self) -> tuple[str, str]:
        """Return a fresh ``(plaintext_token, digest)`` pair."""
        raw_token = secrets.token_hex(self._token_bytes)
        return raw_token, self.digest(raw_token)

    def digest(self, raw_token: str) -> str:
        """Return the storage-safe lookup key for a plaintext token."""
        return hashlib.new(self._algorithm, raw_token.encode("utf-8")).hexdigest()
