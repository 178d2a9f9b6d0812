"""Balance history value object."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from banksync.domain.banking.value_objects.doctype import DocType
from banksync.domain.shared.exceptions import ValidationError

BALANCE_HISTORY_VERSION = 1


class BalanceHistory(BaseModel):
    """
    One year of daily balance snapshots for one account.

    ``balances`` maps ISO dates (``YYYY-MM-DD``) to the balance observed on
    that day. A document only ever holds dates of its own ``year``.
    """

    year: int = Field(..., ge=1900, le=9999)
    account_id: str = Field(..., min_length=1, description="Account storage id")
    balances: dict[str, Decimal] = Field(default_factory=dict)
    version: int = Field(default=BALANCE_HISTORY_VERSION)
    extra_metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Stored metadata keys other than version, written back as is",
    )
    storage_id: str | None = Field(default=None)

    model_config = ConfigDict(frozen=True)

    @field_validator("balances")
    @classmethod
    def validate_balance_keys(cls, v: dict[str, Decimal]) -> dict[str, Decimal]:
        for key in v:
            try:
                date.fromisoformat(key)
            except ValueError as e:
                msg = f"Balance key {key!r} is not an ISO date"
                raise ValueError(msg) from e
        return v

    @classmethod
    def empty(cls, year: int, account_id: str) -> BalanceHistory:
        return cls(year=year, account_id=account_id)

    @property
    def is_persisted(self) -> bool:
        return self.storage_id is not None

    def balance_on(self, day: date) -> Decimal | None:
        return self.balances.get(day.isoformat())

    def with_balance(self, day: date, balance: Decimal) -> BalanceHistory:
        """Return a copy with ``day``'s balance set, all other days untouched."""
        if day.year != self.year:
            msg = (
                f"Cannot record a balance for {day.isoformat()} in the "
                f"{self.year} balance history"
            )
            raise ValidationError(
                msg,
                details={"year": self.year, "day": day.isoformat()},
            )
        balances = dict(self.balances)
        balances[day.isoformat()] = balance
        return self.model_copy(update={"balances": balances})

    def to_document(self) -> dict[str, Any]:
        document: dict[str, Any] = {
            "year": self.year,
            "balances": {key: float(value) for key, value in self.balances.items()},
            "metadata": {**self.extra_metadata, "version": self.version},
            "relationships": {
                "account": {
                    "data": {
                        "_id": self.account_id,
                        "_type": DocType.ACCOUNTS.value,
                    },
                },
            },
        }
        if self.storage_id is not None:
            document["_id"] = self.storage_id
        return document

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> BalanceHistory:
        try:
            account_id = document["relationships"]["account"]["data"]["_id"]
        except (KeyError, TypeError) as e:
            msg = "Balance history document has no account relationship"
            raise ValidationError(
                msg,
                details={"_id": document.get("_id")},
            ) from e

        metadata = document.get("metadata")
        metadata = dict(metadata) if isinstance(metadata, dict) else {}
        try:
            return cls(
                year=document["year"],
                account_id=account_id,
                balances=document.get("balances") or {},
                version=metadata.pop("version", BALANCE_HISTORY_VERSION),
                extra_metadata=metadata,
                storage_id=document.get("_id"),
            )
        except (KeyError, PydanticValidationError) as e:
            msg = f"Malformed balance history document: {e}"
            raise ValidationError(
                msg,
                details={"_id": document.get("_id")},
            ) from e

    def __str__(self) -> str:
        return f"BalanceHistory({self.account_id}, {self.year}, {len(self.balances)} days)"
