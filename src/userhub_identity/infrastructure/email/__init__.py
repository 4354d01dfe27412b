from userhub_identity.infrastructure.email.email_service import (
    EmailDeliveryError,
    EmailService,
)

__all__ = ["EmailDeliveryError", "EmailService"]
