"""Dashboard aggregator: fetches both vendors concurrently and merges the results."""

import asyncio
import logging
from collections.abc import Callable, Sequence
from typing import Any

import httpx

from treasury_dashboard.core.models import (
    App,
    Position,
    PositionType,
    TrackedProtocol,
    ViewModel,
)
from treasury_dashboard.data.loader import Settings
from treasury_dashboard.integrations.zapper import ZapperAPIError, ZapperClient
from treasury_dashboard.integrations.zerion import ZerionAPIError, ZerionClient

logger = logging.getLogger(__name__)


def is_wallet_holding(position: Position) -> bool:
    return position.attributes.position_type == PositionType.WALLET


def is_uniswap_v3(position: Position) -> bool:
    return position.attributes.protocol == TrackedProtocol.UNISWAP_V3


def is_bancor(position: Position) -> bool:
    return position.attributes.protocol == TrackedProtocol.BANCOR


# View model field -> predicate. Each predicate runs independently over the
# full list, so an item may land in several views or in none.
POSITION_VIEWS: dict[str, Callable[[Position], bool]] = {
    "wallet_items": is_wallet_holding,
    "uniswap_items": is_uniswap_v3,
    "bancor_items": is_bancor,
}


def partition_positions(positions: Sequence[Position]) -> dict[str, list[Position]]:
    """
    Split positions into the wallet, Uniswap V3 and Bancor views.

    Parameters
    ----------
    positions : Sequence[Position]
        Positions as returned by Zerion

    Returns
    -------
    dict[str, list[Position]]
        View model field name to matching positions, in input order

    """
    return {
        field: [position for position in positions if predicate(position)]
        for field, predicate in POSITION_VIEWS.items()
    }


def select_app(apps: Sequence[App], app_id: str) -> App | None:
    """Return the first app whose ``app_id`` matches, or None."""
    return next((app for app in apps if app.app_id == app_id), None)


class DashboardAggregator:
    """
    Builds the dashboard view model for a wallet.

    Workflow:
    1. Fetch Zerion positions and Zapper app balances concurrently
    2. Wait for both to settle, success or failure
    3. Filter positions into the wallet, Uniswap V3 and Bancor views
    4. Pick the configured app out of the Zapper balances

    A failing vendor only removes its own fields from the view model.

    Parameters
    ----------
    settings : Settings
        Dashboard configuration
    transport : httpx.AsyncBaseTransport | None
        Transport shared by both vendor clients (tests stub the network here)

    """

    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self.transport = transport

    async def build_view(self, wallet_address: str | None = None) -> ViewModel:
        """
        Fetch both vendors and assemble the view model.

        Parameters
        ----------
        wallet_address : str | None
            Wallet to query. Defaults to the configured wallet.

        Returns
        -------
        ViewModel
            Merged view; empty when both vendors fail

        """
        address = wallet_address or self.settings.wallet_address

        positions_result, apps_result = await asyncio.gather(
            self._fetch_positions(address),
            self._fetch_apps(address),
            return_exceptions=True,
        )

        fields: dict[str, Any] = {}

        if self._succeeded("Zerion", positions_result, ZerionAPIError):
            fields.update(partition_positions(positions_result))

        if self._succeeded("Zapper", apps_result, ZapperAPIError):
            app = select_app(apps_result, self.settings.aggregated_app_id)
            if app is not None:
                fields["balancer"] = app
            else:
                logger.info("No %s app in Zapper balances for %s", self.settings.aggregated_app_id, address)

        # Absent sections stay unset so they are omitted from the JSON dump
        return ViewModel(**fields)

    async def _fetch_positions(self, address: str) -> list[Position]:
        async with ZerionClient(
            api_key=self.settings.zerion.api_key,
            base_url=self.settings.zerion.base_url,
            transport=self.transport,
        ) as zerion:
            return await zerion.get_positions_as_models(address)

    async def _fetch_apps(self, address: str) -> list[App]:
        async with ZapperClient(
            api_key=self.settings.zapper.api_key,
            base_url=self.settings.zapper.base_url,
            transport=self.transport,
        ) as zapper:
            return await zapper.get_app_balances(address)

    @staticmethod
    def _succeeded(vendor: str, result: Any, expected_error: type[Exception]) -> bool:
        """
        Log a failed branch and report whether ``result`` holds data.

        Cancellation and other non-Exception signals are re-raised.
        """
        if not isinstance(result, BaseException):
            return True
        if not isinstance(result, Exception):
            raise result
        if isinstance(result, expected_error):
            logger.warning("%s request failed: %s", vendor, result)
        else:
            logger.warning("%s request failed unexpectedly", vendor, exc_info=result)
        return False
