"""Results of the reconciliation and balance merge steps."""

from __future__ import annotations

from dataclasses import dataclass, field

from banksync.domain.banking.value_objects import (
    BalanceHistory,
    BankAccount,
    BankTransaction,
)
from banksync.domain.integration.value_objects.record_failure import RecordFailure
from banksync.domain.integration.value_objects.vendor_identity_map import (
    VendorIdentityMap,
)


@dataclass
class ReconciliationResult:
    """Persisted accounts/transactions and what went wrong on the way."""

    accounts: list[BankAccount]
    transactions: list[BankTransaction]
    identity_map: VendorIdentityMap
    accounts_created: int = 0
    accounts_updated: int = 0
    transactions_created: int = 0
    transactions_updated: int = 0
    failures: list[RecordFailure] = field(default_factory=list)

    @property
    def has_failures(self) -> bool:
        return bool(self.failures)


@dataclass
class BalanceMergeResult:
    """Balance histories written by one merge run."""

    histories: list[BalanceHistory] = field(default_factory=list)
    histories_created: int = 0
    skipped_without_balance: int = 0
    failures: list[RecordFailure] = field(default_factory=list)

    @property
    def has_failures(self) -> bool:
        return bool(self.failures)
