"""Domain services for integration."""

from banksync.domain.integration.services.balance_history_merger import (
    BalanceHistoryMerger,
)
from banksync.domain.integration.services.banking_reconciliator import (
    BankingReconciliator,
)

__all__ = [
    "BalanceHistoryMerger",
    "BankingReconciliator",
]
