"""Command layer - operations that write to the document store."""

from banksync.application.commands.banking_sync_command import BankingSyncCommand

__all__ = [
    "BankingSyncCommand",
]
