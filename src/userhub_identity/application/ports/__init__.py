"""Ports the identity core needs from the outside world."""

from userhub_identity.application.ports.image_store import ImageStore
from userhub_identity.application.ports.mailer import Mailer

__all__ = ["ImageStore", "Mailer"]
