"""Bank transaction value object."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

UNCATEGORIZED_CATEGORY_ID = 0


class BankTransaction(BaseModel):
    """Value object representing a bank transaction (an "operation")."""

    vendor_id: str = Field(..., min_length=1, description="Source identifier")
    vendor_account_id: str = Field(
        ...,
        min_length=1,
        description="Source identifier of the owning account",
    )
    date: dt.date = Field(..., description="When transaction was booked")
    date_operation: dt.date = Field(..., description="When money actually moved")
    date_import: dt.datetime | None = Field(
        default=None,
        description="First successful import; never changed afterwards",
    )
    label: str = Field(..., description="Cleaned-up description")
    original_label: str | None = Field(default=None, description="Raw description")
    amount: Decimal = Field(..., description="Transaction amount")
    currency: str | None = Field(default=None, max_length=3)
    automatic_category_id: int = Field(default=UNCATEGORIZED_CATEGORY_ID)
    type: str = Field(default="none")

    account: str | None = Field(
        default=None,
        description="Storage id of the owning account, set on reconciliation",
    )
    storage_id: str | None = Field(default=None, alias="_id")

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @field_validator("vendor_id", "vendor_account_id", mode="before")
    @classmethod
    def coerce_identifier(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v

    @field_serializer("amount")
    def serialize_amount(self, value: Decimal) -> float:
        return float(value)

    def is_credit(self) -> bool:
        return self.amount > 0

    def is_debit(self) -> bool:
        return self.amount < 0

    def with_storage_id(self, storage_id: str) -> BankTransaction:
        return self.model_copy(update={"storage_id": storage_id})

    def to_document(self, include_date_import: bool = True) -> dict[str, Any]:
        """Serialize to the camelCase document shape.

        ``include_date_import=False`` leaves ``dateImport`` out so an upsert
        keeps the value stored by the first import.
        """
        exclude = None if include_date_import else {"date_import"}
        return self.model_dump(
            mode="json",
            by_alias=True,
            exclude_none=True,
            exclude=exclude,
        )

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> BankTransaction:
        return cls.model_validate(document)

    def __str__(self) -> str:
        direction = "+" if self.is_credit() else ""
        currency = f" {self.currency}" if self.currency else ""
        return f"{self.date}: {direction}{self.amount}{currency} - {self.label[:50]}"
