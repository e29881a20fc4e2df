"""Tests for the Zerion and Zapper API clients."""

import asyncio
import base64

import httpx
import pytest

from treasury_dashboard.core.models import AppId, PositionType
from treasury_dashboard.integrations.zapper import ZapperAPIError, ZapperClient
from treasury_dashboard.integrations.zerion import ZerionAPIError, ZerionClient, ZerionNotFoundError

from conftest import WALLET, ZAPPER_URL, ZERION_URL, vendor_transport


async def _zerion_positions(transport, api_key=None):
    async with ZerionClient(api_key=api_key, base_url=ZERION_URL, transport=transport) as client:
        return await client.get_positions_as_models(WALLET)


async def _zapper_apps(transport, api_key="zapper-test-key"):
    async with ZapperClient(api_key=api_key, base_url=ZAPPER_URL, transport=transport) as client:
        return await client.get_app_balances(WALLET)


class TestZerionClient:
    def test_get_positions_as_models(self, zerion_payload):
        seen = []
        positions = asyncio.run(_zerion_positions(vendor_transport(zerion_payload, [], seen)))

        assert len(positions) == 6
        assert positions[0].attributes.position_type == PositionType.WALLET

        request = seen[0]
        assert request.url.path == f"/v1/wallets/{WALLET}/positions/"
        assert request.url.params["currency"] == "usd"
        assert "authorization" not in request.headers

    def test_basic_auth_when_key_configured(self, zerion_payload):
        seen = []
        asyncio.run(_zerion_positions(vendor_transport(zerion_payload, [], seen), api_key="zk_dev_123"))

        expected = base64.b64encode(b"zk_dev_123:").decode()
        assert seen[0].headers["authorization"] == f"Basic {expected}"

    def test_not_found(self):
        with pytest.raises(ZerionNotFoundError):
            asyncio.run(_zerion_positions(vendor_transport(404, [])))

    def test_not_found_is_api_error(self):
        assert issubclass(ZerionNotFoundError, ZerionAPIError)

    def test_server_error(self):
        with pytest.raises(ZerionAPIError, match="HTTP error 500"):
            asyncio.run(_zerion_positions(vendor_transport(500, [])))

    def test_transport_error(self):
        error = httpx.ConnectError("connection refused")
        with pytest.raises(ZerionAPIError, match="HTTP request failed"):
            asyncio.run(_zerion_positions(vendor_transport(error, [])))

    def test_timeout(self):
        error = httpx.ReadTimeout("read timed out")
        with pytest.raises(ZerionAPIError, match="Request timeout"):
            asyncio.run(_zerion_positions(vendor_transport(error, [])))

    def test_invalid_payload(self):
        with pytest.raises(ZerionAPIError, match="Unexpected positions payload"):
            asyncio.run(_zerion_positions(vendor_transport({"data": [{"type": "positions"}]}, [])))


class TestZapperClient:
    def test_get_app_balances(self, zapper_payload):
        seen = []
        apps = asyncio.run(_zapper_apps(vendor_transport({}, zapper_payload, seen)))

        assert [app.app_id for app in apps] == [AppId.UNISWAP_V3, AppId.BALANCER_V2]

        request = seen[0]
        assert request.url.path == "/v2/balances/apps"
        assert request.url.params["addresses[]"] == WALLET
        expected = base64.b64encode(b"zapper-test-key:").decode()
        assert request.headers["authorization"] == f"Basic {expected}"

    def test_missing_api_key_fails_without_request(self, zapper_payload):
        seen = []
        with pytest.raises(ZapperAPIError, match="ZAPPER_API_KEY"):
            asyncio.run(_zapper_apps(vendor_transport({}, zapper_payload, seen), api_key=None))

        assert seen == []

    def test_non_list_payload(self):
        with pytest.raises(ZapperAPIError, match="Expected a list"):
            asyncio.run(_zapper_apps(vendor_transport({}, {"error": "unexpected"})))

    def test_unauthorized(self):
        with pytest.raises(ZapperAPIError, match="HTTP error 401"):
            asyncio.run(_zapper_apps(vendor_transport({}, 401)))

    def test_empty_list(self):
        assert asyncio.run(_zapper_apps(vendor_transport({}, []))) == []
