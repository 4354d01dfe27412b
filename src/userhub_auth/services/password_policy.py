"""Password composition policy.

Rules are checked in a fixed order and the first failing rule wins, since
the messages are shown to users verbatim.
"""

import re

SPECIAL_CHARACTERS = "!@#%&$*|_^"

BLANK_PASSWORD = "password can't be blank"
MISSING_LOWERCASE = "Password must contain a lower case letter"
MISSING_UPPERCASE = "Password must contain an upper case letter"
MISSING_DIGIT = "Password must contain a number"
MISSING_SPECIAL = "Password must contain a special character"

_LOWERCASE_RE = re.compile(r"[a-z]")
_UPPERCASE_RE = re.compile(r"[A-Z]")
_DIGIT_RE = re.compile(r"[0-9]")
_SPECIAL_RE = re.compile(f"[{re.escape(SPECIAL_CHARACTERS)}]")


class PasswordPolicy:
    """Stateless validator for plaintext passwords.

    Parameters
    ----------
    min_length
        Shortest accepted password. ``None`` disables the lower bound.
    max_length
        Longest accepted password. ``None`` disables the upper bound.

    Examples
    --------
    >>> policy = PasswordPolicy()
    >>> policy.validate("Password1")
    'Password must contain a special character'
    >>> policy.validate("Password1!")
    ''
    """

    DEFAULT_MIN_LENGTH = 8
    DEFAULT_MAX_LENGTH = 16

    def __init__(
        self,
        min_length: int | None = DEFAULT_MIN_LENGTH,
        max_length: int | None = DEFAULT_MAX_LENGTH,
    ):
        self._min_length = min_length
        self._max_length = max_length

    def validate(self, password: str | None) -> str:
        """Return the first violated rule's message, or ``""`` if none."""
        if not password or not password.strip():
            return BLANK_PASSWORD
        if not _LOWERCASE_RE.search(password):
            return MISSING_LOWERCASE
        if not _UPPERCASE_RE.search(password):
            return MISSING_UPPERCASE
        if not _DIGIT_RE.search(password):
            return MISSING_DIGIT
        if not _SPECIAL_RE.search(password):
            return MISSING_SPECIAL
        return self._validate_length(password)

    def _validate_length(self, password: str) -> str:
        too_short = self._min_length is not None and len(password) < self._min_length
        too_long = self._max_length is not None and len(password) > self._max_length
        if not (too_short or too_long):
            return ""
        if self._min_length is not None and self._max_length is not None:
            return (
                f"Password must be between {self._min_length} and "
                f"{self._max_length} characters"
            )
        if too_short:
            return f"Password must be at least {self._min_length} characters"
        return f"Password cannot exceed {self._max_length} characters"
