"""Image store port. Interface for uploaded profile images."""

from typing import Protocol


class ImageStore(Protocol):
    """Port for the object store holding profile images.

    Uploading happens in the transport layer; the core only needs to
    remove images it no longer references.
    """

    def delete(self, key: str) -> None:
        """Delete the object stored under ``key``, raising on failure."""
        ...
