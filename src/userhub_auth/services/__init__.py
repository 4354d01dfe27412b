"""Authentication services.

Provides password hashing, password policy checks, JWT management and
password reset token generation.
"""

from userhub_auth.services.jwt_service import JWTService
from userhub_auth.services.password_policy import PasswordPolicy
from userhub_auth.services.password_service import PasswordHashingService
from userhub_auth.services.reset_token_service import ResetTokenService

__all__ = [
    "JWTService",
    "PasswordHashingService",
    "PasswordPolicy",
    "ResetTokenService",
]
