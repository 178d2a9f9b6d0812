"""Map raw Bankin records to the canonical banking value objects."""

from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any, Mapping, Optional, Sequence

from pydantic import ValidationError as PydanticValidationError

from banksync.domain.banking.mapping import resolve_account_type, resolve_category_id
from banksync.domain.banking.value_objects import BankAccount, BankTransaction, DocType
from banksync.domain.integration.value_objects import RecordFailure
from banksync.domain.shared.exceptions import ErrorCode
from banksync.domain.shared.time import Clock, SystemClock

if TYPE_CHECKING:
    from banksync.domain.banking.ports.banking_source_port import RawRecord
    from banksync.domain.banking.value_objects import Bank

logger = logging.getLogger(__name__)

UNKNOWN_INSTITUTION = "none"

_MALFORMED = (
    AttributeError,
    KeyError,
    TypeError,
    ValueError,
    InvalidOperation,
    PydanticValidationError,
)


def _to_decimal(value: Any) -> Decimal:
    if value is None:
        msg = "amount is missing"
        raise ValueError(msg)
    return Decimal(str(value))


def _to_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    # Bankin sends "YYYY-MM-DD", sometimes with a time part
    return date.fromisoformat(str(value)[:10])


def _nested_id(raw: Mapping[str, Any], key: str) -> Any:
    nested = raw.get(key)
    if isinstance(nested, Mapping):
        return nested.get("id")
    return None


class RecordNormalizer:
    """
    Turn raw source records into BankAccount and BankTransaction objects.

    The bank table resolves institution names; the clock stamps
    ``dateImport`` on transactions.
    """

    def __init__(
        self,
        banks: Optional[Mapping[str, Bank]] = None,
        clock: Optional[Clock] = None,
    ):
        self._banks = banks or {}
        self._clock = clock or SystemClock()

    def normalize_account(self, raw: RawRecord) -> BankAccount:
        bank_id = _nested_id(raw, "bank")
        bank = self._banks.get(str(bank_id)) if bank_id is not None else None
        balance = raw.get("balance")

        return BankAccount(
            vendor_id=str(raw["id"]),
            label=raw["name"],
            institution_label=bank.name if bank else UNKNOWN_INSTITUTION,
            type=resolve_account_type(raw.get("type")),
            number=str(raw["id"]),
            balance=_to_decimal(balance) if balance is not None else None,
        )

    def normalize_transaction(
        self,
        raw: RawRecord,
        imported_at: Optional[datetime] = None,
        account_vendor_id: Optional[str] = None,
    ) -> BankTransaction:
        """Normalize one transaction.

        ``account_vendor_id`` is used when the record does not name its
        account (the listing is per account anyway).
        """
        vendor_account_id = _nested_id(raw, "account") or account_vendor_id
        if vendor_account_id is None:
            msg = "transaction does not reference an account"
            raise ValueError(msg)

        booked = _to_date(raw["date"])
        return BankTransaction(
            vendor_id=str(raw["id"]),
            vendor_account_id=str(vendor_account_id),
            date=booked,
            date_operation=booked,
            date_import=imported_at or self._clock.now(),
            label=raw["description"],
            original_label=raw.get("raw_description"),
            amount=_to_decimal(raw.get("amount")),
            currency=raw.get("currency_code"),
            automatic_category_id=resolve_category_id(_nested_id(raw, "category")),
            type="none",
        )

    def normalize_accounts(
        self,
        raw_accounts: Sequence[RawRecord],
    ) -> tuple[list[BankAccount], list[RecordFailure]]:
        accounts: list[BankAccount] = []
        failures: list[RecordFailure] = []

        for raw in raw_accounts:
            try:
                accounts.append(self.normalize_account(raw))
            except _MALFORMED as e:  # NOQA: PERF203
                failures.append(self._malformed(DocType.ACCOUNTS, raw, e))

        return accounts, failures

    def normalize_transactions(
        self,
        raw_transactions: Sequence[RawRecord],
        account_vendor_id: Optional[str] = None,
    ) -> tuple[list[BankTransaction], list[RecordFailure]]:
        """Normalize a listing; every transaction shares one import timestamp."""
        imported_at = self._clock.now()
        transactions: list[BankTransaction] = []
        failures: list[RecordFailure] = []

        for raw in raw_transactions:
            try:
                transactions.append(
                    self.normalize_transaction(raw, imported_at, account_vendor_id),
                )
            except _MALFORMED as e:  # NOQA: PERF203
                failures.append(self._malformed(DocType.OPERATIONS, raw, e))

        return transactions, failures

    def _malformed(
        self,
        doctype: DocType,
        raw: Any,
        error: Exception,
    ) -> RecordFailure:
        vendor_id = str(raw.get("id", "?")) if isinstance(raw, Mapping) else "?"
        logger.warning(
            "Skipping malformed %s record %s: %s",
            doctype.value,
            vendor_id,
            error,
        )
        return RecordFailure(
            doctype=doctype.value,
            vendor_id=vendor_id,
            code=ErrorCode.VALIDATION_ERROR,
            message=f"Malformed record: {error}",
            details={"error_type": type(error).__name__},
        )
