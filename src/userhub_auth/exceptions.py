"""Authentication primitive exceptions.

These exceptions are raised by the userhub_auth package. They describe
internal failures (bad configuration, corrupt hashes, bad tokens) and are
translated by the application layer into user-facing failures.
"""


class AuthError(Exception):
    """Base exception for all authentication primitive errors."""

    def __init__(self, message: str = "Authentication error"):
        self.message = message
        super().__init__(self.message)


class HashingError(AuthError):
    """Raised when a password cannot be hashed or a stored hash is malformed."""

    def __init__(self, message: str = "Password hashing failed"):
        super().__init__(message)


class TokenError(AuthError):
    """Raised when a JWT cannot be issued or verified."""

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message)


class ExpiredTokenError(TokenError):
    """Raised when a JWT carries a valid signature but is past its expiry."""

    def __init__(self, message: str = "Token has expired"):
        super().__init__(message)


class InvalidTokenError(TokenError):
    """Raised when a JWT is malformed, tampered with, or signed by another key."""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)
