"""Pytest configuration and vendor payload fixtures for treasury-dashboard tests."""

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from treasury_dashboard.data.loader import Settings, VendorSettings

WALLET = "0xf5307a74d1550739ef81c6488dc5c7a6a53e5ac2"

ZERION_URL = "https://api.zerion.test/v1"
ZAPPER_URL = "https://api.zapper.test/v2"


def make_position(
    name: str,
    symbol: str,
    position_type: str = "wallet",
    protocol: str | None = None,
    value: float | None = 100.0,
    price: float | None = 1.0,
    changes: dict[str, float] | None = None,
    icon_url: str | None = None,
    chain: str = "ethereum",
) -> dict[str, Any]:
    """Build one element of a Zerion positions payload."""
    return {
        "type": "positions",
        "id": f"{symbol.lower()}-{chain}-{position_type}-{protocol or 'none'}",
        "attributes": {
            "parent": None,
            "protocol": protocol,
            "name": "Asset",
            "position_type": position_type,
            "quantity": {
                "int": "1500000000000000000",
                "decimals": 18,
                "float": 1.5,
                "numeric": "1.5",
            },
            "value": value,
            "price": price,
            "changes": changes,
            "fungible_info": {
                "name": name,
                "symbol": symbol,
                "icon": {"url": icon_url} if icon_url else None,
                "flags": {"verified": True},
                "implementations": [
                    {"chain_id": chain, "address": "0x0000000000000000000000000000000000000001", "decimals": 18},
                ],
            },
            "flags": {"displayable": True},
            "updated_at": "2023-01-01T00:00:00Z",
            "updated_at_block": 16300000,
        },
        "relationships": {
            "chain": {
                "links": {"related": f"https://api.zerion.io/v1/chains/{chain}"},
                "data": {"type": "chains", "id": chain},
            },
            "fungible": {
                "links": {"related": f"https://api.zerion.io/v1/fungibles/{symbol.lower()}"},
                "data": {"type": "fungibles", "id": symbol.lower()},
            },
        },
    }


def make_asset(label: str, balance_usd: float, images: list[str] | None = None, **extra: Any) -> dict[str, Any]:
    """Build one Zapper asset with a single base token."""
    asset = {
        "key": f"asset-{label}",
        "type": "app-token",
        "appId": "balancer-v2",
        "groupId": "pool",
        "network": "ethereum",
        "address": "0x0000000000000000000000000000000000000002",
        "tokens": [
            {
                "metaType": "supplied",
                "type": "base-token",
                "network": "ethereum",
                "address": "0x0000000000000000000000000000000000000003",
                "symbol": "WETH",
                "decimals": 18,
                "price": 1200.0,
                "balance": 1.0,
                "balanceRaw": "1000000000000000000",
                "balanceUSD": 1200.0,
            }
        ],
        "symbol": "BPT",
        "decimals": 18,
        "supply": 1000.0,
        "pricePerShare": [0.5, 0.5],
        "price": 10.0,
        "dataProps": {"liquidity": 1000000.0, "apy": 0.05, "isActive": True},
        "displayProps": {
            "label": label,
            "secondaryLabel": "50/50",
            "tertiaryLabel": "Balancer",
            "images": images if images is not None else ["https://img.test/weth.png"],
            "statsItems": [{"label": "Liquidity", "value": {"type": "dollar", "value": 1000000.0}}],
        },
        "balance": 3.0,
        "balanceRaw": "3000000000000000000",
        "balanceUSD": balance_usd,
    }
    asset.update(extra)
    return asset


def make_app(app_id: str = "balancer-v2", products: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    """Build one element of a Zapper balances/apps payload."""
    return {
        "key": f"{app_id}-key",
        "address": WALLET,
        "appId": app_id,
        "appName": "Balancer V2" if app_id == "balancer-v2" else app_id.title(),
        "appImage": f"https://img.test/{app_id}.png",
        "network": "ethereum",
        "updatedAt": "2023-01-01T00:00:00Z",
        "balanceUSD": 5000.0,
        "products": products
        if products is not None
        else [{"label": "Pool", "assets": [make_asset("WETH / DAI", 3000.0)], "meta": []}],
    }


@pytest.fixture
def zerion_payload() -> dict[str, Any]:
    return {
        "links": {"self": f"https://api.zerion.io/v1/wallets/{WALLET}/positions/"},
        "data": [
            make_position("Ether", "ETH", value=1800.0, price=1200.0, changes={"absolute_1d": 25.0, "percent_1d": 1.4},
                          icon_url="https://img.test/eth.png"),
            make_position("Uniswap V3 ETH/USDC", "UNI-V3-POS", position_type="deposit", protocol="Uniswap V3"),
            make_position("VITA", "VITA", value=None, changes=None),
            make_position("Bancor Network Token", "BNT", position_type="staked", protocol="Bancor",
                          changes={"absolute_1d": 0.0, "percent_1d": 0.0}),
            make_position("Curve LP", "CRV-LP", position_type="deposit", protocol="Curve"),
            make_position("USD Coin", "USDC", position_type="deposit", protocol="Uniswap V3"),
        ],
    }


@pytest.fixture
def zapper_payload() -> list[dict[str, Any]]:
    return [
        make_app("uniswap-v3"),
        make_app(
            "balancer-v2",
            products=[
                {
                    "label": "Pool",
                    "assets": [
                        make_asset("Small", 100.0),
                        make_asset("Large", 900.0, images=["a", "b", "c", "d"]),
                        make_asset("Medium A", 500.0, images=[]),
                        make_asset("Medium B", 500.0, images=["a", "b"]),
                    ],
                    "meta": [],
                },
                {"label": "Farm", "assets": [make_asset("Gauge", 50.0)], "meta": []},
            ],
        ),
    ]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        title="VitaDAO Treasury",
        wallet_address=WALLET,
        aggregated_app_id="balancer-v2",
        zerion=VendorSettings(base_url=ZERION_URL),
        zapper=VendorSettings(base_url=ZAPPER_URL, api_key="zapper-test-key"),
    )


VendorResponse = dict[str, Any] | list[Any] | int | Exception


def vendor_transport(zerion: VendorResponse, zapper: VendorResponse, seen: list[httpx.Request] | None = None) -> httpx.MockTransport:
    """
    Mock transport answering both vendors.

    Each vendor answer is a JSON body, an int status code (sent with an empty
    JSON object), or an exception raised as a transport failure.
    """

    def answer(request: httpx.Request, response: VendorResponse) -> httpx.Response:
        if isinstance(response, Exception):
            raise response
        if isinstance(response, int):
            return httpx.Response(response, json={})
        return httpx.Response(200, content=json.dumps(response), headers={"content-type": "application/json"})

    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        if request.url.host == "api.zerion.test":
            return answer(request, zerion)
        if request.url.host == "api.zapper.test":
            return answer(request, zapper)
        return httpx.Response(404)

    return httpx.MockTransport(handler)


@pytest.fixture
def make_transport() -> Callable[..., httpx.MockTransport]:
    return vendor_transport
