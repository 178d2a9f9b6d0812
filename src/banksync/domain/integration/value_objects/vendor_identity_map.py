"""Vendor identity to storage identity lookup for one sync run."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class VendorIdentityMap:
    """
    Maps vendor ids to storage ids, per doctype.

    Built when reconciliation starts (from the store, or injected by the
    caller) and updated as records are persisted. It is passed explicitly
    from the Reconciliator to the BalanceHistoryMerger.
    """

    accounts: dict[str, str] = field(default_factory=dict)
    transactions: dict[str, str] = field(default_factory=dict)

    def account_storage_id(self, vendor_id: str) -> str | None:
        return self.accounts.get(vendor_id)

    def transaction_storage_id(self, vendor_id: str) -> str | None:
        return self.transactions.get(vendor_id)

    def knows_account(self, vendor_id: str) -> bool:
        return vendor_id in self.accounts

    def knows_transaction(self, vendor_id: str) -> bool:
        return vendor_id in self.transactions

    def register_account(self, vendor_id: str, storage_id: str) -> None:
        self.accounts[vendor_id] = storage_id

    def register_transaction(self, vendor_id: str, storage_id: str) -> None:
        self.transactions[vendor_id] = storage_id

    def copy(self) -> VendorIdentityMap:
        return VendorIdentityMap(
            accounts=dict(self.accounts),
            transactions=dict(self.transactions),
        )
