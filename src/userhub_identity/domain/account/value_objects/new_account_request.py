"""Registration input."""

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from userhub_identity.domain.account.value_objects.profile_image import ProfileImage


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value).strip()


@dataclass(frozen=True)
class NewAccountRequest:
    """Unvalidated registration data as submitted by the caller.

    Every field may be missing; registration validation decides which
    message to report. The email is lower-cased on construction from a
    mapping so lookups and storage always see the normalized form.
    """

    name: Optional[str] = None
    user_name: Optional[str] = None
    gender: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    password: Optional[str] = None
    profile_image: Optional[ProfileImage] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "NewAccountRequest":
        """Build a request from a payload using either camelCase or snake_case keys."""
        email = _clean(data.get("email"))
        image = data.get("profileImage", data.get("profile_image"))
        if image is not None and not isinstance(image, ProfileImage):
            image = ProfileImage.from_dict(image)
        # passwords are taken verbatim, surrounding whitespace is significant
        password = data.get("password")
        return cls(
            name=_clean(data.get("name")),
            user_name=_clean(data.get("userName", data.get("user_name"))),
            gender=_clean(data.get("gender")),
            email=email.lower() if email else email,
            phone=_clean(data.get("phone")),
            password=None if password is None else str(password),
            profile_image=image,
        )
