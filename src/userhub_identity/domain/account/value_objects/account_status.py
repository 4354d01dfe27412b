from enum import Enum


class AccountStatus(str, Enum):
    """Lifecycle status of an account. Deleted is a soft delete."""

    ACTIVE = "Active"
    INACTIVE = "Inactive"
    DELETED = "Deleted"
