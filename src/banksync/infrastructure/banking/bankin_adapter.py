"""Bankin adapter - Anti-Corruption Layer for the Bankin sync API.

This adapter implements the BankingSourcePort on top of httpx. It handles
authentication, pagination and the translation of HTTP failures into domain
exceptions. Records are returned raw; the RecordNormalizer maps them.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Mapping, Optional

import httpx

from banksync.domain.banking.exceptions import (
    AuthenticationFailedError,
    SourceUnavailableError,
    TransactionFetchError,
)
from banksync.domain.banking.ports import BankingSourcePort
from banksync.domain.banking.value_objects import Bank
from banksync_config.settings import get_settings

if TYPE_CHECKING:
    from banksync.domain.banking.ports.banking_source_port import RawRecord
    from banksync.domain.banking.value_objects import SourceCredentials

logger = logging.getLogger(__name__)

# Status codes the login endpoint uses to reject credentials
_LOGIN_REJECTED = {400, 401, 403, 404}


class BankinAdapter(BankingSourcePort):
    """
    Bankin Adapter - Anti-Corruption Layer.

    Responsibilities:
    1. Implement BankingSourcePort interface
    2. Follow Bankin's pagination until every resource is fetched
    3. Convert HTTP and transport errors to domain exceptions
    4. Manage the httpx client lifecycle
    """

    def __init__(  # noqa: PLR0913
        self,
        base_url: Optional[str] = None,
        api_version: Optional[str] = None,
        page_limit: Optional[int] = None,
        max_pages: Optional[int] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self._base_url = (base_url or settings.bankin_base_url).rstrip("/")
        self._api_version = api_version or settings.bankin_version
        self._page_limit = page_limit or settings.bankin_page_limit
        self._max_pages = max_pages or settings.bankin_max_pages
        self._timeout = timeout or settings.bankin_timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._credentials: SourceCredentials | None = None
        self._access_token: str | None = None

    async def __aenter__(self) -> BankinAdapter:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                headers={"Bankin-Version": self._api_version},
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        self._access_token = None

    def is_authenticated(self) -> bool:
        return self._access_token is not None

    async def authenticate(self, credentials: SourceCredentials) -> str:
        logger.info("Authenticating %s at %s", credentials.email, self._base_url)

        try:
            response = await self._get_client().post(
                "/authenticate",
                params={
                    "client_id": credentials.client_id,
                    "client_secret": credentials.client_secret.get_secret_value(),
                    "email": credentials.email,
                    "password": credentials.password.get_secret_value(),
                },
                headers={"Bankin-Device": credentials.device},
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error("Authentication failed with status %d", status)
            if status in _LOGIN_REJECTED:
                raise AuthenticationFailedError(email=credentials.email) from e
            msg = f"Authentication request failed with status {status}"
            raise SourceUnavailableError(msg, operation="authenticate") from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Authentication request failed: %s", e)
            msg = f"Authentication request failed: {e}"
            raise SourceUnavailableError(msg, operation="authenticate") from e

        token = payload.get("access_token") if isinstance(payload, dict) else None
        if not token:
            msg = "Authentication response did not contain an access token"
            raise AuthenticationFailedError(msg, email=credentials.email)

        self._credentials = credentials
        self._access_token = token
        logger.info("Successfully logged in")
        return token

    async def list_banks(self) -> Mapping[str, Bank]:
        countries = await self._fetch_resources(
            "/banks",
            operation="list_banks",
            authenticated=False,
        )
        banks: dict[str, Bank] = {}
        for country in countries:
            for parent_bank in country.get("parent_banks") or []:
                for raw_bank in parent_bank.get("banks") or []:
                    bank = Bank(
                        id=raw_bank["id"],
                        name=raw_bank.get("name") or "",
                        country_code=raw_bank.get("country_code")
                        or country.get("code"),
                        parent_name=parent_bank.get("name"),
                    )
                    banks[bank.id] = bank

        logger.info("Found %d banks", len(banks))
        return MappingProxyType(banks)

    async def list_accounts(self) -> list[RawRecord]:
        accounts = await self._fetch_resources("/accounts", operation="list_accounts")
        logger.info("Found %d accounts", len(accounts))
        return accounts

    async def list_transactions(self, account_vendor_id: str) -> list[RawRecord]:
        try:
            transactions = await self._fetch_resources(
                f"/accounts/{account_vendor_id}/transactions",
                operation="list_transactions",
            )
        except SourceUnavailableError as e:
            raise TransactionFetchError(
                f"Failed to fetch transactions of account {account_vendor_id}",
                account_vendor_id=account_vendor_id,
                reason=e.message,
            ) from e

        logger.info(
            "Fetched %d transactions for account %s",
            len(transactions),
            account_vendor_id,
        )
        return transactions

    async def _fetch_resources(
        self,
        path: str,
        operation: str,
        authenticated: bool = True,
    ) -> list[RawRecord]:
        if self._credentials is None:
            msg = "Not authenticated. Call authenticate() first."
            raise SourceUnavailableError(msg, operation=operation)

        headers = {}
        if authenticated:
            headers["Authorization"] = f"Bearer {self._access_token}"

        params = {
            "client_id": self._credentials.client_id,
            "client_secret": self._credentials.client_secret.get_secret_value(),
            "limit": self._page_limit,
        }

        resources: list[RawRecord] = []
        url: str | httpx.URL = path
        for page in range(1, self._max_pages + 1):
            payload = await self._get_page(url, params, headers, operation)
            resources.extend(payload.get("resources") or [])

            next_uri = (payload.get("pagination") or {}).get("next_uri")
            if not next_uri:
                return resources
            url = httpx.URL(self._base_url).join(next_uri)
            logger.debug("%s: following page %d -> %s", operation, page + 1, url)

        logger.warning(
            "%s: stopped after %d pages, results may be incomplete",
            operation,
            self._max_pages,
        )
        return resources

    async def _get_page(
        self,
        url: str | httpx.URL,
        params: dict[str, Any],
        headers: dict[str, str],
        operation: str,
    ) -> dict[str, Any]:
        try:
            response = await self._get_client().get(url, params=params, headers=headers)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                "%s failed with status %d: %s",
                operation,
                e.response.status_code,
                e.response.text[:200] if e.response.text else "no body",
            )
            msg = f"{operation} failed with status {e.response.status_code}"
            raise SourceUnavailableError(msg, operation=operation) from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error("%s failed (%s): %s", operation, type(e).__name__, e)
            msg = f"{operation} failed: {e}"
            raise SourceUnavailableError(msg, operation=operation) from e

        if not isinstance(payload, dict):
            msg = f"{operation} returned an unexpected payload"
            raise SourceUnavailableError(msg, operation=operation)
        return payload
