"""Account schemas for request/response models.

Request fields are optional on purpose: the identity core reports missing
or malformed values with ordered, user-facing messages, so the schemas
only shape the payload.
"""

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from userhub_identity import Account, NewAccountRequest, ProfileImage


class ProfileImageSchema(BaseModel):
    """Reference to an image already uploaded to the image store."""

    key: str
    location: str = ""
    original_name: str = Field(default="", alias="originalName")

    model_config = ConfigDict(populate_by_name=True)

    def to_domain(self) -> ProfileImage:
        return ProfileImage(
            key=self.key,
            location=self.location,
            original_name=self.original_name,
        )


class RegisterRequest(BaseModel):
    """Request schema for account registration."""

    name: Optional[str] = None
    user_name: Optional[str] = Field(default=None, alias="userName")
    gender: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[Union[str, int]] = None
    password: Optional[str] = None
    profile_image: Optional[ProfileImageSchema] = Field(
        default=None,
        alias="profileImage",
    )

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "name": "Jane Doe",
                "userName": "jane.doe",
                "gender": "Female",
                "email": "jane@example.com",
                "phone": "9898989898",
                "password": "Password1!",
            },
        },
    )

    def to_domain(self) -> NewAccountRequest:
        data: dict[str, Any] = self.model_dump(exclude={"profile_image"})
        if self.profile_image is not None:
            data["profile_image"] = self.profile_image.to_domain()
        return NewAccountRequest.from_mapping(data)


class LoginRequest(BaseModel):
    """Request schema for login."""

    email: Optional[str] = None
    password: Optional[str] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "jane@example.com",
                "password": "Password1!",
            },
        },
    )


class ChangePasswordRequest(BaseModel):
    """Request schema for changing the current account's password."""

    current_password: Optional[str] = Field(default=None, alias="currentPassword")
    new_password: Optional[str] = Field(default=None, alias="newPassword")
    confirm_new_password: Optional[str] = Field(
        default=None,
        alias="confirmNewPassword",
    )

    model_config = ConfigDict(populate_by_name=True)


class ForgotPasswordRequest(BaseModel):
    """Request schema for requesting a password reset email."""

    email: Optional[str] = None


class ResetPasswordRequest(BaseModel):
    """Request schema for setting a new password with a reset token."""

    password: Optional[str] = None


class UpdateProfileImageRequest(BaseModel):
    """Request schema for replacing the profile image reference.

    Omitting ``profileImage`` clears the reference.
    """

    profile_image: Optional[ProfileImageSchema] = Field(
        default=None,
        alias="profileImage",
    )

    model_config = ConfigDict(populate_by_name=True)


class AccountResponse(BaseModel):
    """Public view of an account. Never includes credentials."""

    id: str
    name: str
    user_name: str = Field(alias="userName")
    email: str
    phone: str
    gender: str
    role: str
    status: str
    profile_image: Optional[dict[str, str]] = Field(
        default=None,
        alias="profileImage",
    )
    login_count: int = Field(alias="loginCount")
    last_login_at: Optional[str] = Field(
        default=None,
        alias="lastLoginAt",
    )
    password_changed_at: Optional[str] = Field(
        default=None,
        alias="passwordChangedAt",
    )
    created_at: str = Field(alias="createdAt")
    updated_at: str = Field(alias="updatedAt")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_domain(cls, account: Account) -> "AccountResponse":
        public = account.to_public_dict()
        return cls(
            id=public["id"],
            name=public["name"],
            user_name=public["userName"],
            email=public["email"],
            phone=public["phone"],
            gender=public["gender"],
            role=public["role"],
            status=public["status"],
            profile_image=public["profileImage"],
            login_count=public["loginCount"],
            last_login_at=public["lastLoginAt"],
            password_changed_at=public["passwordChangedAt"],
            created_at=public["createdAt"],
            updated_at=public["updatedAt"],
        )


class AuthResponse(BaseModel):
    """Response schema for registration and login."""

    status: str = "success"
    message: str
    token: str
    data: AccountResponse


class AccountDataResponse(BaseModel):
    status: str = "success"
    data: AccountResponse


class MessageResponse(BaseModel):
    status: str = "success"
    message: str
