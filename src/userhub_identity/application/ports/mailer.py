"""Mailer port. Interface for outbound email."""

from typing import Protocol


class Mailer(Protocol):
    """Port for sending HTML email.

    Delivery failures are raised to the caller as ordinary exceptions so
    flows that depend on the email can compensate.
    """

    def send(self, to_address: str, subject: str, html_body: str) -> None:
        """Send one email, raising on failure."""
        ...
