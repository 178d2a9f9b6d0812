"""Per-record failure entry of a sync run."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from banksync.domain.shared.exceptions import DomainException, ErrorCode


@dataclass(frozen=True)
class RecordFailure:
    """A record that was skipped or could not be persisted."""

    doctype: str
    vendor_id: str
    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_error(
        cls,
        doctype: str,
        vendor_id: str,
        error: DomainException,
    ) -> RecordFailure:
        return cls(
            doctype=doctype,
            vendor_id=vendor_id,
            code=error.code,
            message=error.message,
            details=dict(error.details),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "doctype": self.doctype,
            "vendor_id": self.vendor_id,
            "code": self.code.value,
            "message": self.message,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.doctype} {self.vendor_id}: {self.message}"
