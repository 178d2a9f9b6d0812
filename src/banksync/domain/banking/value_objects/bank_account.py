"""Bank account value object."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel


class BankAccount(BaseModel):
    """
    Value object representing a bank account.

    This is the canonical shape of an account fetched from the aggregation
    source. ``vendor_id`` is the source's natural key; ``storage_id`` is set
    once the account has been persisted in the document store.
    """

    vendor_id: str = Field(..., min_length=1, description="Source identifier")
    label: str = Field(..., description="Account name as shown by the bank")
    institution_label: str = Field(
        default="none",
        description="Name of the bank holding the account",
    )
    type: str = Field(default="none", description="Normalized account type")
    number: str = Field(..., description="Account number")
    balance: Decimal | None = Field(
        default=None,
        description="Current balance (if available)",
    )

    storage_id: str | None = Field(default=None, alias="_id")

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @field_validator("vendor_id", "number", mode="before")
    @classmethod
    def coerce_identifier(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v

    @field_serializer("balance")
    def serialize_balance(self, value: Decimal | None) -> float | None:
        return float(value) if value is not None else None

    @property
    def is_persisted(self) -> bool:
        return self.storage_id is not None

    def with_storage_id(self, storage_id: str) -> BankAccount:
        return self.model_copy(update={"storage_id": storage_id})

    def to_document(self) -> dict[str, Any]:
        """Serialize to the camelCase document shape (``_id`` only if set)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> BankAccount:
        return cls.model_validate(document)

    def __str__(self) -> str:
        balance_str = f" ({self.balance})" if self.balance is not None else ""
        return f"{self.label} - {self.vendor_id}{balance_str}"
