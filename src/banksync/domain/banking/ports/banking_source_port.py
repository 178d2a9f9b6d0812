"""Banking-aggregation source port interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Mapping

if TYPE_CHECKING:
    from banksync.domain.banking.value_objects.bank import Bank
    from banksync.domain.banking.value_objects.source_credentials import (
        SourceCredentials,
    )

RawRecord = dict[str, Any]


class BankingSourcePort(ABC):
    """
    Interface for the banking-aggregation source.

    This defines what a sync run needs from the upstream service. Records
    are returned raw; normalizing them is the RecordNormalizer's job.
    """

    @abstractmethod
    async def authenticate(self, credentials: SourceCredentials) -> str:
        """
        Log in and keep the access token for subsequent calls.

        Parameters
        ----------
        credentials
            Client and user credentials

        Returns
        -------
        The access token

        Raises
        ------
        AuthenticationFailedError
            If the source rejects the credentials
        SourceUnavailableError
            If the source cannot be reached
        """

    @abstractmethod
    async def list_banks(self) -> Mapping[str, Bank]:
        """
        Fetch all banks known to the source.

        Returns
        -------
        Read-only mapping from bank id to bank descriptor

        Raises
        ------
        SourceUnavailableError
            If the fetch fails
        """

    @abstractmethod
    async def list_accounts(self) -> list[RawRecord]:
        """
        Fetch all accounts of the authenticated user.

        Returns
        -------
        List of raw account records

        Raises
        ------
        SourceUnavailableError
            If not authenticated or the fetch fails
        """

    @abstractmethod
    async def list_transactions(self, account_vendor_id: str) -> list[RawRecord]:
        """
        Fetch the transactions of one account.

        Parameters
        ----------
        account_vendor_id
            Source identifier of the account

        Returns
        -------
        List of raw transaction records

        Raises
        ------
        TransactionFetchError
            If not authenticated or the fetch fails
        """

    @abstractmethod
    async def close(self) -> None:
        """Release network resources."""
