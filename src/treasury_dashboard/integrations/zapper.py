"""Zapper API client for DeFi app balances."""

import logging
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from treasury_dashboard.core.models import App

logger = logging.getLogger(__name__)

_APPS_ADAPTER = TypeAdapter(list[App])


class ZapperAPIError(Exception):
    """Exception raised for Zapper API errors."""


class ZapperClient:
    """
    Async client for the Zapper balances API.

    Parameters
    ----------
    api_key : str | None
        Zapper API key. Every request fails with ZapperAPIError when missing.
    base_url : str
        API base URL
    transport : httpx.AsyncBaseTransport | None
        Custom transport, used to stub the network in tests

    """

    BASE_URL = "https://api.zapper.fi/v2"

    def __init__(
        self,
        api_key: str | None,
        base_url: str = BASE_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        # Zapper uses HTTP basic auth with key as username
        auth = (api_key, "") if api_key else None
        self.client = httpx.AsyncClient(auth=auth, transport=transport)

    async def get_app_balances_raw(self, wallet_address: str) -> Any:
        """
        Fetch the raw app balances payload for a wallet.

        Parameters
        ----------
        wallet_address : str
            Wallet address

        Returns
        -------
        Any
            Decoded JSON body, normally a list of apps

        Raises
        ------
        ZapperAPIError
            If no API key is configured or the request fails

        """
        if not self.api_key:
            msg = "ZAPPER_API_KEY is not configured"
            raise ZapperAPIError(msg)

        url = f"{self.base_url}/balances/apps"
        logger.debug("GET %s", url)

        try:
            response = await self.client.get(url, params={"addresses[]": wallet_address})
            response.raise_for_status()
            return response.json()

        except httpx.TimeoutException as e:
            msg = f"Request timeout: {e}"
            raise ZapperAPIError(msg) from e
        except httpx.HTTPStatusError as e:
            msg = f"HTTP error {e.response.status_code}: {e}"
            raise ZapperAPIError(msg) from e
        except httpx.HTTPError as e:
            msg = f"HTTP request failed: {e}"
            raise ZapperAPIError(msg) from e
        except ValueError as e:
            msg = f"Invalid JSON in response: {e}"
            raise ZapperAPIError(msg) from e

    async def get_app_balances(self, wallet_address: str) -> list[App]:
        """
        Fetch app balances and parse them into App models.

        Raises
        ------
        ZapperAPIError
            If the request fails or the payload is not a list of apps

        """
        raw_data = await self.get_app_balances_raw(wallet_address)

        if not isinstance(raw_data, list):
            msg = f"Expected a list of apps, got {type(raw_data).__name__}"
            raise ZapperAPIError(msg)

        try:
            apps = _APPS_ADAPTER.validate_python(raw_data)
        except ValidationError as e:
            msg = f"Unexpected app balances payload: {e}"
            raise ZapperAPIError(msg) from e

        logger.debug("Zapper returned %d apps for %s", len(apps), wallet_address)
        return apps

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    async def __aenter__(self) -> "ZapperClient":
        """Async context manager entry."""
        return self

    async def __aexit__(
        self,
        exc_type: type | None,
        exc_val: Exception | None,
        exc_tb: object | None,
    ) -> None:
        """Async context manager exit."""
        await self.close()
