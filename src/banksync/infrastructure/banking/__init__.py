"""Banking infrastructure adapters."""

from banksync.infrastructure.banking.bankin_adapter import BankinAdapter

__all__ = [
    "BankinAdapter",
]
