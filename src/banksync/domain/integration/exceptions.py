"""Integration domain exceptions.

Most of these describe a problem with a single record and end up in the
per-record failure report of a sync run. DuplicateVendorIdError is the
exception: it means the fetched batch itself is inconsistent and aborts
reconciliation.
"""

from typing import Any

from banksync.domain.shared.exceptions import (
    ConflictError,
    DomainException,
    EntityNotFoundError,
    ErrorCode,
)


class IntegrationError(DomainException):
    """Base exception for integration domain errors."""


class OrphanReferenceError(EntityNotFoundError):
    """Raised when a transaction references an account not in the batch."""

    def __init__(self, transaction_vendor_id: str, account_vendor_id: str) -> None:
        super().__init__(
            message=(
                f"Transaction {transaction_vendor_id} references unknown "
                f"account {account_vendor_id}"
            ),
            code=ErrorCode.ORPHAN_REFERENCE,
            details={
                "transaction_vendor_id": transaction_vendor_id,
                "account_vendor_id": account_vendor_id,
            },
        )


class DuplicateVendorIdError(ConflictError):
    """Raised when two different incoming records share a vendor id."""

    def __init__(self, doctype: str, vendor_id: str) -> None:
        super().__init__(
            message=(
                f"Two different {doctype} records in the same batch share "
                f"vendor id {vendor_id}"
            ),
            code=ErrorCode.DUPLICATE_VENDOR_ID,
            details={"doctype": doctype, "vendor_id": vendor_id},
        )


class PersistenceConflictError(ConflictError):
    """Raised when the document store rejects a write."""

    def __init__(
        self,
        doctype: str,
        reason: str,
        key: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=f"Could not persist {doctype} document: {reason}",
            code=ErrorCode.PERSISTENCE_CONFLICT,
            details={"doctype": doctype, "reason": reason, "key": key or {}},
        )


class DocumentStoreUnavailableError(IntegrationError):
    """Raised when the document store cannot be reached or queried."""

    def __init__(self, doctype: str, reason: str) -> None:
        super().__init__(
            message=f"Document store unavailable ({doctype}): {reason}",
            code=ErrorCode.STORE_UNAVAILABLE,
            details={"doctype": doctype, "reason": reason},
        )
