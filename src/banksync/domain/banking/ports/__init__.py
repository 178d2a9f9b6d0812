"""Ports (interfaces) for the banking domain."""

from banksync.domain.banking.ports.banking_source_port import BankingSourcePort

__all__ = [
    "BankingSourcePort",
]
