from userhub_identity.domain.account.aggregates.account import (
    ACCOUNT_ID_LENGTH,
    Account,
    generate_account_id,
)

__all__ = ["ACCOUNT_ID_LENGTH", "Account", "generate_account_id"]
