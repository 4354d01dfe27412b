"""Reference to an uploaded profile image."""

from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True)
class ProfileImage:
    """Pointer to an image held by the external image store.

    Attributes
    ----------
    key
        Object key inside the image store, used for deletion
    location
        Public URL of the image
    original_name
        File name as uploaded by the user
    """

    key: str
    location: str
    original_name: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "key": self.key,
            "location": self.location,
            "originalName": self.original_name,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ProfileImage":
        return cls(
            key=str(data["key"]),
            location=str(data.get("location", "")),
            original_name=str(
                data.get("originalName", data.get("original_name", "")) or ""
            ),
        )
