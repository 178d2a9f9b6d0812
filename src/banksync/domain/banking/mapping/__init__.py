"""Static lookup tables from vendor codes to normalized codes."""

from banksync.domain.banking.mapping.account_type_mapping import (
    ACCOUNT_TYPE_MAPPING,
    UNKNOWN_ACCOUNT_TYPE,
    resolve_account_type,
)
from banksync.domain.banking.mapping.operation_category_mapping import (
    OPERATION_CATEGORY_MAPPING,
    resolve_category_id,
)

__all__ = [
    "ACCOUNT_TYPE_MAPPING",
    "OPERATION_CATEGORY_MAPPING",
    "UNKNOWN_ACCOUNT_TYPE",
    "resolve_account_type",
    "resolve_category_id",
]
