from userhub_identity.application.services.authentication_service import (
    AuthenticationService,
)
from userhub_identity.application.services.password_reset_service import (
    PasswordResetService,
)

__all__ = ["AuthenticationService", "PasswordResetService"]
