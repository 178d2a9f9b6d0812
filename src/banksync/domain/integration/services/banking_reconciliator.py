"""Reconcile fetched accounts and transactions with the stored ones."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence, TypeVar

from banksync.domain.banking.value_objects import (
    BankAccount,
    BankTransaction,
    DocType,
)
from banksync.domain.integration.exceptions import (
    DuplicateVendorIdError,
    OrphanReferenceError,
    PersistenceConflictError,
)
from banksync.domain.integration.value_objects import (
    ReconciliationResult,
    RecordFailure,
    VendorIdentityMap,
)

if TYPE_CHECKING:
    from banksync.domain.integration.ports import Document, DocumentStorePort

logger = logging.getLogger(__name__)

VENDOR_KEY_FIELDS = ("vendorId",)

RecordT = TypeVar("RecordT", BankAccount, BankTransaction)


class BankingReconciliator:
    """
    Match fetched records against stored ones by vendor id and persist them.

    Accounts are written before transactions so every transaction can point
    at the storage id of its account. Problems with single records are
    collected in the result; only an inconsistent input batch aborts.
    """

    def __init__(self, document_store: DocumentStorePort):
        self._store = document_store

    async def reconcile(
        self,
        accounts: Sequence[BankAccount],
        transactions: Sequence[BankTransaction],
        identity_map: VendorIdentityMap | None = None,
    ) -> ReconciliationResult:
        """
        Persist accounts and transactions with create-or-update semantics.

        Parameters
        ----------
        accounts
            Normalized accounts fetched in this run
        transactions
            Normalized transactions of those accounts
        identity_map
            Known vendor to storage ids; ids it lacks are looked up in the
            store, the caller's map is not modified

        Returns
        -------
        Persisted records, the updated identity map and per-record failures

        Raises
        ------
        DuplicateVendorIdError
            If two different incoming records share a vendor id
        DocumentStoreUnavailableError
            If the stored identities cannot be loaded
        """
        unique_accounts = self._check_batch_integrity(accounts, DocType.ACCOUNTS)
        unique_transactions = self._check_batch_integrity(
            transactions,
            DocType.OPERATIONS,
        )

        identity_map = await self.load_identity_map(
            unique_accounts,
            unique_transactions,
            known=identity_map,
        )

        result = ReconciliationResult(
            accounts=[],
            transactions=[],
            identity_map=identity_map,
        )

        saved_accounts = await self._save_accounts(unique_accounts, result)
        input_account_ids = {account.vendor_id for account in unique_accounts}
        await self._save_transactions(
            unique_transactions,
            input_account_ids,
            saved_accounts,
            result,
        )

        logger.info(
            "Reconciled %d accounts (%d new, %d updated) and %d transactions "
            "(%d new, %d updated), %d failures",
            len(result.accounts),
            result.accounts_created,
            result.accounts_updated,
            len(result.transactions),
            result.transactions_created,
            result.transactions_updated,
            len(result.failures),
        )
        return result

    async def load_identity_map(
        self,
        accounts: Sequence[BankAccount],
        transactions: Sequence[BankTransaction],
        known: VendorIdentityMap | None = None,
    ) -> VendorIdentityMap:
        """Look up the storage ids already assigned to these vendor ids.

        Ids present in ``known`` are taken from it; the store is only asked
        for the others.
        """
        identity_map = known.copy() if known is not None else VendorIdentityMap()

        unknown_accounts = [
            a.vendor_id for a in accounts if not identity_map.knows_account(a.vendor_id)
        ]
        unknown_transactions = [
            tx.vendor_id
            for tx in transactions
            if not identity_map.knows_transaction(tx.vendor_id)
        ]

        if unknown_accounts:
            documents = await self._store.query(
                DocType.ACCOUNTS.value,
                {"vendorId": {"$in": unknown_accounts}},
            )
            for document in documents:
                if not identity_map.knows_account(document["vendorId"]):
                    identity_map.register_account(
                        document["vendorId"],
                        document["_id"],
                    )

        if unknown_transactions:
            documents = await self._store.query(
                DocType.OPERATIONS.value,
                {"vendorId": {"$in": unknown_transactions}},
            )
            for document in documents:
                if not identity_map.knows_transaction(document["vendorId"]):
                    identity_map.register_transaction(
                        document["vendorId"],
                        document["_id"],
                    )

        logger.debug(
            "Found %d stored accounts and %d stored transactions",
            len(identity_map.accounts),
            len(identity_map.transactions),
        )
        return identity_map

    def _check_batch_integrity(
        self,
        records: Sequence[RecordT],
        doctype: DocType,
    ) -> list[RecordT]:
        unique: dict[str, RecordT] = {}
        for record in records:
            existing = unique.get(record.vendor_id)
            if existing is None:
                unique[record.vendor_id] = record
            elif existing == record:
                logger.debug(
                    "Collapsing identical %s record %s",
                    doctype.value,
                    record.vendor_id,
                )
            else:
                raise DuplicateVendorIdError(doctype.value, record.vendor_id)
        return list(unique.values())

    async def _save_accounts(
        self,
        accounts: list[BankAccount],
        result: ReconciliationResult,
    ) -> dict[str, str]:
        identity_map = result.identity_map
        known = [identity_map.knows_account(a.vendor_id) for a in accounts]

        documents = []
        for account in accounts:
            document = account.to_document()
            storage_id = identity_map.account_storage_id(account.vendor_id)
            if storage_id is not None:
                document["_id"] = storage_id
            documents.append(document)

        outcomes = await self._persist(DocType.ACCOUNTS, documents)

        saved: dict[str, str] = {}
        for account, was_known, outcome in zip(accounts, known, outcomes):
            if isinstance(outcome, PersistenceConflictError):
                logger.warning("Account %s not saved: %s", account.vendor_id, outcome)
                result.failures.append(
                    RecordFailure.from_error(
                        DocType.ACCOUNTS.value,
                        account.vendor_id,
                        outcome,
                    ),
                )
                continue

            persisted = BankAccount.from_document(outcome)
            identity_map.register_account(persisted.vendor_id, outcome["_id"])
            saved[persisted.vendor_id] = outcome["_id"]
            result.accounts.append(persisted)
            if was_known:
                result.accounts_updated += 1
            else:
                result.accounts_created += 1

        return saved

    async def _save_transactions(
        self,
        transactions: list[BankTransaction],
        input_account_ids: set[str],
        saved_accounts: dict[str, str],
        result: ReconciliationResult,
    ) -> None:
        identity_map = result.identity_map
        pending: list[BankTransaction] = []
        documents: list[Document] = []

        for transaction in transactions:
            if transaction.vendor_account_id not in input_account_ids:
                error = OrphanReferenceError(
                    transaction.vendor_id,
                    transaction.vendor_account_id,
                )
                logger.warning("Skipping transaction: %s", error)
                result.failures.append(
                    RecordFailure.from_error(
                        DocType.OPERATIONS.value,
                        transaction.vendor_id,
                        error,
                    ),
                )
                continue

            account_storage_id = saved_accounts.get(transaction.vendor_account_id)
            if account_storage_id is None:
                error = PersistenceConflictError(
                    DocType.OPERATIONS.value,
                    f"account {transaction.vendor_account_id} was not persisted",
                    key={"vendorId": transaction.vendor_id},
                )
                result.failures.append(
                    RecordFailure.from_error(
                        DocType.OPERATIONS.value,
                        transaction.vendor_id,
                        error,
                    ),
                )
                continue

            attached = transaction.model_copy(update={"account": account_storage_id})
            storage_id = identity_map.transaction_storage_id(transaction.vendor_id)
            # dateImport stays as written by the first import
            document = attached.to_document(include_date_import=storage_id is None)
            if storage_id is not None:
                document["_id"] = storage_id
            pending.append(attached)
            documents.append(document)

        known = [identity_map.knows_transaction(tx.vendor_id) for tx in pending]
        outcomes = await self._persist(DocType.OPERATIONS, documents)

        for transaction, was_known, outcome in zip(pending, known, outcomes):
            if isinstance(outcome, PersistenceConflictError):
                logger.warning(
                    "Transaction %s not saved: %s",
                    transaction.vendor_id,
                    outcome,
                )
                result.failures.append(
                    RecordFailure.from_error(
                        DocType.OPERATIONS.value,
                        transaction.vendor_id,
                        outcome,
                    ),
                )
                continue

            persisted = BankTransaction.from_document(outcome)
            identity_map.register_transaction(persisted.vendor_id, outcome["_id"])
            result.transactions.append(persisted)
            if was_known:
                result.transactions_updated += 1
            else:
                result.transactions_created += 1

    async def _persist(
        self,
        doctype: DocType,
        documents: list[Document],
    ) -> list[Document | PersistenceConflictError]:
        """Upsert as one batch, falling back to one-by-one to isolate failures."""
        if not documents:
            return []

        try:
            return list(
                await self._store.upsert_by_identifier(
                    documents,
                    doctype.value,
                    VENDOR_KEY_FIELDS,
                ),
            )
        except PersistenceConflictError as e:
            if len(documents) == 1:
                return [e]
            logger.warning(
                "Batch upsert of %d %s documents failed (%s), retrying one by one",
                len(documents),
                doctype.value,
                e,
            )

        outcomes: list[Document | PersistenceConflictError] = []
        for document in documents:
            try:
                persisted = await self._store.upsert_by_identifier(
                    [document],
                    doctype.value,
                    VENDOR_KEY_FIELDS,
                )
                outcomes.append(persisted[0])
            except PersistenceConflictError as e:  # NOQA: PERF203
                outcomes.append(e)
        return outcomes
