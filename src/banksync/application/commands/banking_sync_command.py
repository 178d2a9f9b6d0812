"""Sync Bankin accounts, transactions and balances into the document store."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Optional, Sequence
from zoneinfo import ZoneInfo

from banksync.application.dtos import SyncResult
from banksync.application.services import RecordNormalizer
from banksync.domain.banking.ports import BankingSourcePort
from banksync.domain.integration.ports import DocumentStorePort
from banksync.domain.integration.services import (
    BalanceHistoryMerger,
    BankingReconciliator,
)
from banksync.domain.shared.time import Clock, SystemClock
from banksync.infrastructure.banking import BankinAdapter
from banksync.infrastructure.persistence.sqlalchemy.repositories import (
    DocumentStoreSQLAlchemy,
)

if TYPE_CHECKING:
    from banksync.domain.banking.ports.banking_source_port import RawRecord
    from banksync.domain.banking.value_objects import (
        BankAccount,
        SourceCredentials,
    )
    from banksync.domain.integration.value_objects import RecordFailure
    from banksync_config.settings import Settings

logger = logging.getLogger(__name__)


class BankingSyncCommand:
    """
    Run one sync: fetch from the source, reconcile, merge balances.

    Authentication, source and batch-integrity errors abort the run and
    propagate; whatever was written before stays written. Problems with
    single records end up in ``SyncResult.failures``.
    """

    def __init__(
        self,
        source: BankingSourcePort,
        document_store: DocumentStorePort,
        clock: Optional[Clock] = None,
        transaction_fetch_concurrency: int = 1,
    ):
        if transaction_fetch_concurrency < 1:
            msg = "transaction_fetch_concurrency must be at least 1"
            raise ValueError(msg)

        self._source = source
        self._store = document_store
        self._clock = clock or SystemClock()
        self._concurrency = transaction_fetch_concurrency
        self._reconciliator = BankingReconciliator(document_store)
        self._merger = BalanceHistoryMerger(document_store, self._clock)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        clock: Optional[Clock] = None,
    ) -> BankingSyncCommand:
        return cls(
            source=BankinAdapter(
                base_url=settings.bankin_base_url,
                api_version=settings.bankin_version,
                page_limit=settings.bankin_page_limit,
                max_pages=settings.bankin_max_pages,
                timeout=settings.bankin_timeout,
            ),
            document_store=DocumentStoreSQLAlchemy.from_url(settings.database_url),
            clock=clock or SystemClock(ZoneInfo(settings.sync_timezone)),
            transaction_fetch_concurrency=settings.transaction_fetch_concurrency,
        )

    @property
    def source(self) -> BankingSourcePort:
        return self._source

    @property
    def document_store(self) -> DocumentStorePort:
        return self._store

    async def execute(self, credentials: SourceCredentials) -> SyncResult:
        synced_at = self._clock.now()
        failures: list[RecordFailure] = []

        await self._source.authenticate(credentials)

        banks = await self._source.list_banks()
        normalizer = RecordNormalizer(banks, self._clock)

        raw_accounts = await self._source.list_accounts()
        accounts, account_failures = normalizer.normalize_accounts(raw_accounts)
        failures.extend(account_failures)

        raw_transactions = await self._fetch_transactions(accounts)
        transactions = []
        for account, raw in zip(accounts, raw_transactions):
            normalized, tx_failures = normalizer.normalize_transactions(
                raw,
                account_vendor_id=account.vendor_id,
            )
            transactions.extend(normalized)
            failures.extend(tx_failures)

        logger.info(
            "Fetched %d accounts and %d transactions",
            len(accounts),
            len(transactions),
        )

        reconciliation = await self._reconciliator.reconcile(accounts, transactions)
        failures.extend(reconciliation.failures)

        balances = await self._merger.merge(
            reconciliation.accounts,
            reconciliation.identity_map,
        )
        failures.extend(balances.failures)

        result = SyncResult(
            synced_at=synced_at,
            accounts_fetched=len(raw_accounts),
            transactions_fetched=sum(len(raw) for raw in raw_transactions),
            accounts_created=reconciliation.accounts_created,
            accounts_updated=reconciliation.accounts_updated,
            transactions_created=reconciliation.transactions_created,
            transactions_updated=reconciliation.transactions_updated,
            balance_histories_written=len(balances.histories),
            balance_histories_created=balances.histories_created,
            failures=tuple(failures),
        )

        if result.success:
            logger.info("Sync finished successfully")
        else:
            logger.warning("Sync finished with %d failures", len(failures))
        return result

    async def _fetch_transactions(
        self,
        accounts: Sequence[BankAccount],
    ) -> list[list[RawRecord]]:
        """Fetch the transactions of every account, in account order."""
        if self._concurrency == 1:
            return [
                await self._source.list_transactions(account.vendor_id)
                for account in accounts
            ]

        semaphore = asyncio.Semaphore(self._concurrency)

        async def fetch(account: BankAccount) -> list[RawRecord]:
            async with semaphore:
                return await self._source.list_transactions(account.vendor_id)

        outcomes = await asyncio.gather(
            *(fetch(account) for account in accounts),
            return_exceptions=True,
        )
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                raise outcome
        return list(outcomes)
