"""Value objects for the account domain."""

from userhub_identity.domain.account.value_objects.account_role import AccountRole
from userhub_identity.domain.account.value_objects.account_status import (
    AccountStatus,
)
from userhub_identity.domain.account.value_objects.account_update import (
    AccountUpdate,
)
from userhub_identity.domain.account.value_objects.gender import Gender
from userhub_identity.domain.account.value_objects.new_account_request import (
    NewAccountRequest,
)
from userhub_identity.domain.account.value_objects.profile_image import ProfileImage

__all__ = [
    "AccountRole",
    "AccountStatus",
    "AccountUpdate",
    "Gender",
    "NewAccountRequest",
    "ProfileImage",
]
