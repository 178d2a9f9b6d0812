"""Merge today's account balances into the yearly balance histories."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Optional, Sequence

from banksync.domain.banking.value_objects import (
    BalanceHistory,
    BankAccount,
    DocType,
)
from banksync.domain.integration.exceptions import (
    DocumentStoreUnavailableError,
    PersistenceConflictError,
)
from banksync.domain.integration.value_objects import (
    BalanceMergeResult,
    RecordFailure,
)
from banksync.domain.shared.exceptions import EntityNotFoundError, ValidationError
from banksync.domain.shared.time import Clock, SystemClock

if TYPE_CHECKING:
    from banksync.domain.integration.ports import DocumentStorePort
    from banksync.domain.integration.value_objects import VendorIdentityMap

logger = logging.getLogger(__name__)

ACCOUNT_REF_PATH = "relationships.account.data._id"
HISTORY_KEY_FIELDS = ("_id",)


class BalanceHistoryMerger:
    """
    Record each account's balance for today in its balance history.

    One document per account and year. Only today's entry is written, so
    running the merger several times a day is idempotent and earlier days
    are never touched. A failure for one account does not affect the others.
    """

    def __init__(
        self,
        document_store: DocumentStorePort,
        clock: Optional[Clock] = None,
    ):
        self._store = document_store
        self._clock = clock or SystemClock()

    async def merge(
        self,
        accounts: Sequence[BankAccount],
        identity_map: Optional[VendorIdentityMap] = None,
    ) -> BalanceMergeResult:
        """
        Merge today's balance of every account.

        Parameters
        ----------
        accounts
            Reconciled accounts (storage id set) with their current balance
        identity_map
            Fallback lookup for accounts without a storage id

        Returns
        -------
        Written histories and per-account failures
        """
        today = self._clock.today()
        result = BalanceMergeResult()

        for account in accounts:
            if account.balance is None:
                logger.info(
                    "Account %s has no balance, skipping balance history",
                    account.vendor_id,
                )
                result.skipped_without_balance += 1
                continue

            account_id = account.storage_id
            if account_id is None and identity_map is not None:
                account_id = identity_map.account_storage_id(account.vendor_id)
            if account_id is None:
                error = EntityNotFoundError(
                    f"Account {account.vendor_id} has no storage id",
                    details={"vendor_id": account.vendor_id},
                )
                result.failures.append(
                    RecordFailure.from_error(
                        DocType.BALANCE_HISTORIES.value,
                        account.vendor_id,
                        error,
                    ),
                )
                continue

            try:
                history, created = await self.merge_account(
                    account_id,
                    account.balance,
                    today,
                )
            except (
                DocumentStoreUnavailableError,
                PersistenceConflictError,
                ValidationError,
            ) as e:
                logger.warning(
                    "Balance history of account %s not updated: %s",
                    account.vendor_id,
                    e,
                )
                result.failures.append(
                    RecordFailure.from_error(
                        DocType.BALANCE_HISTORIES.value,
                        account.vendor_id,
                        e,
                    ),
                )
                continue

            result.histories.append(history)
            if created:
                result.histories_created += 1

        return result

    async def merge_account(
        self,
        account_id: str,
        balance: Decimal,
        day: date,
    ) -> tuple[BalanceHistory, bool]:
        """Merge one balance; returns the persisted history and whether it is new."""
        existing = await self.find_balance_history(day.year, account_id)
        history = existing or BalanceHistory.empty(day.year, account_id)

        merged = history.with_balance(day, balance)
        persisted = await self._store.upsert_by_identifier(
            [merged.to_document()],
            DocType.BALANCE_HISTORIES.value,
            HISTORY_KEY_FIELDS,
        )
        return BalanceHistory.from_document(persisted[0]), existing is None

    async def find_balance_history(
        self,
        year: int,
        account_id: str,
    ) -> Optional[BalanceHistory]:
        """Find the history of ``account_id`` for ``year``.

        Several documents for the same account and year should not exist;
        if they do, the oldest one is used and the others are left alone.
        """
        documents = await self._store.query(
            DocType.BALANCE_HISTORIES.value,
            {"year": year, ACCOUNT_REF_PATH: account_id},
            limit=2,
        )

        if not documents:
            logger.info(
                "No balance history for year %s and account %s, creating a new one",
                year,
                account_id,
            )
            return None

        if len(documents) > 1:
            logger.warning(
                "Found several balance histories for year %s and account %s, "
                "using %s",
                year,
                account_id,
                documents[0]["_id"],
            )
        else:
            logger.info(
                "Found balance history for year %s and account %s",
                year,
                account_id,
            )

        return BalanceHistory.from_document(documents[0])
