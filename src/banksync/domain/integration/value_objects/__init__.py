"""Value objects for integration domain."""

from banksync.domain.integration.value_objects.reconciliation_result import (
    BalanceMergeResult,
    ReconciliationResult,
)
from banksync.domain.integration.value_objects.record_failure import RecordFailure
from banksync.domain.integration.value_objects.vendor_identity_map import (
    VendorIdentityMap,
)

__all__ = [
    "BalanceMergeResult",
    "ReconciliationResult",
    "RecordFailure",
    "VendorIdentityMap",
]
