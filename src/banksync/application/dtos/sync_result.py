"""DTO for the banking sync command result."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from banksync.domain.integration.value_objects import RecordFailure


@dataclass(frozen=True)
class SyncResult:
    """Result of one sync run.

    Fatal errors are raised by the command; this only describes runs
    that went through, possibly with per-record failures.
    """

    synced_at: datetime
    accounts_fetched: int
    transactions_fetched: int
    accounts_created: int = 0
    accounts_updated: int = 0
    transactions_created: int = 0
    transactions_updated: int = 0
    balance_histories_written: int = 0
    balance_histories_created: int = 0
    failures: tuple[RecordFailure, ...] = field(default_factory=tuple)

    @property
    def success(self) -> bool:
        return not self.failures

    @property
    def accounts_persisted(self) -> int:
        return self.accounts_created + self.accounts_updated

    @property
    def transactions_persisted(self) -> int:
        return self.transactions_created + self.transactions_updated

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "synced_at": self.synced_at.isoformat(),
            "accounts_fetched": self.accounts_fetched,
            "transactions_fetched": self.transactions_fetched,
            "accounts_created": self.accounts_created,
            "accounts_updated": self.accounts_updated,
            "transactions_created": self.transactions_created,
            "transactions_updated": self.transactions_updated,
            "balance_histories_written": self.balance_histories_written,
            "balance_histories_created": self.balance_histories_created,
            "failures": [failure.to_dict() for failure in self.failures],
        }
