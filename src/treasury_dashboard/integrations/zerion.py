"""Zerion API client for wallet position tracking."""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from treasury_dashboard.core.models import Position, PositionsResponse

logger = logging.getLogger(__name__)


class ZerionAPIError(Exception):
    """Exception raised for Zerion API errors."""


class ZerionNotFoundError(ZerionAPIError):
    """Raised when Zerion answers 404 for a wallet."""


class ZerionClient:
    """
    Async client for the Zerion API.

    Fetches every position (wallet holdings and protocol positions) held
    by a wallet.

    Parameters
    ----------
    api_key : str | None
        Zerion API key. Requests are sent without auth when omitted.
    base_url : str
        API base URL
    transport : httpx.AsyncBaseTransport | None
        Custom transport, used to stub the network in tests

    """

    BASE_URL = "https://api.zerion.io/v1"

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str = BASE_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        # Zerion uses HTTP basic auth with key as username
        auth = (api_key, "") if api_key else None
        self.client = httpx.AsyncClient(auth=auth, transport=transport)

    async def get_positions(self, wallet_address: str) -> dict[str, Any]:
        """
        Fetch the raw positions payload for a wallet.

        Parameters
        ----------
        wallet_address : str
            Wallet address

        Returns
        -------
        dict[str, Any]
            Raw Zerion API response

        Raises
        ------
        ZerionNotFoundError
            If Zerion does not know the wallet
        ZerionAPIError
            If the request fails for any other reason

        """
        url = f"{self.base_url}/wallets/{wallet_address}/positions/"
        logger.debug("GET %s", url)

        try:
            response = await self.client.get(url, params={"currency": "usd"})
            response.raise_for_status()
            return response.json()

        except httpx.TimeoutException as e:
            msg = f"Request timeout: {e}"
            raise ZerionAPIError(msg) from e
        except httpx.HTTPStatusError as e:
            msg = f"HTTP error {e.response.status_code}: {e}"
            if e.response.status_code == httpx.codes.NOT_FOUND:
                raise ZerionNotFoundError(msg) from e
            raise ZerionAPIError(msg) from e
        except httpx.HTTPError as e:
            msg = f"HTTP request failed: {e}"
            raise ZerionAPIError(msg) from e
        except ValueError as e:
            msg = f"Invalid JSON in response: {e}"
            raise ZerionAPIError(msg) from e

    async def get_positions_as_models(self, wallet_address: str) -> list[Position]:
        """
        Fetch positions and parse them into Position models.

        Parameters
        ----------
        wallet_address : str
            Wallet address

        Returns
        -------
        list[Position]
            Positions in the order Zerion returned them

        Raises
        ------
        ZerionAPIError
            If the request fails or the payload does not match the expected shape

        """
        raw_data = await self.get_positions(wallet_address)

        try:
            response = PositionsResponse.model_validate(raw_data)
        except ValidationError as e:
            msg = f"Unexpected positions payload: {e}"
            raise ZerionAPIError(msg) from e

        logger.debug("Zerion returned %d positions for %s", len(response.data), wallet_address)
        return response.data

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    async def __aenter__(self) -> "ZerionClient":
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
