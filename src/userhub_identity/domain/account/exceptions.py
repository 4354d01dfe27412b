"""Account domain exceptions."""

from typing import Any, Optional

from userhub_identity.domain.shared.exceptions import (
    ConflictError,
    EntityNotFoundError,
    ErrorCode,
)


class AccountNotFoundError(EntityNotFoundError):
    """Account not found."""

    def __init__(self, account_id: str) -> None:
        super().__init__(
            "Account not found",
            code=ErrorCode.ACCOUNT_NOT_FOUND,
            details={"account_id": account_id},
        )
        self.account_id = account_id


class DuplicateAccountError(ConflictError):
    """A unique account attribute (userName, phone, email) is already taken."""

    FIELD_LABELS: dict[str, str] = {
        "userName": "user name",
        "phone": "phone number",
        "email": "email address",
    }

    def __init__(
        self,
        field: str,
        value: Optional[str] = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        label = self.FIELD_LABELS.get(field, field)
        if value:
            message = (
                "Error creating a new user. "
                f"A user already exists with this {value} {label}."
            )
        else:
            message = f"Error creating a new user. The {label} is already taken."
        super().__init__(message, field=field, details=details)
        self.value = value
