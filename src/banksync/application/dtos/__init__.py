"""Data transfer objects returned by application commands."""

from banksync.application.dtos.sync_result import SyncResult

__all__ = [
    "SyncResult",
]
