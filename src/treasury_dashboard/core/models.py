"""Data models for vendor payloads and the merged dashboard view."""

from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class PositionType(StrEnum):
    """Zerion position type."""

    WALLET = "wallet"
    DEPOSIT = "deposit"
    STAKED = "staked"
    REWARD = "reward"
    LOAN = "loan"
    LOCKED = "locked"
    MARGIN = "margin"
    AIRDROP = "airdrop"


class TrackedProtocol(StrEnum):
    """Protocols that get their own table on the dashboard."""

    UNISWAP_V3 = "Uniswap V3"
    BANCOR = "Bancor"


class AppId(StrEnum):
    """Zapper app identifiers known to the dashboard."""

    BALANCER_V2 = "balancer-v2"
    UNISWAP_V3 = "uniswap-v3"
    VESPER = "vesper"
    SOLACE = "solace"
    MUX = "mux"
    DFX = "dfx"
    LIDO = "lido"


# ---------------------------------------------------------------------------
# Zerion: GET /v1/wallets/{address}/positions/
# ---------------------------------------------------------------------------


class ZerionModel(BaseModel):
    """Base for Zerion payload models (snake_case keys, immutable)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Quantity(ZerionModel):
    """
    Token amount as reported by Zerion.

    Attributes
    ----------
    integer : str
        Exact amount in base units (``int`` on the wire)
    decimals : int
        Token decimals
    float_value : float
        ``integer / 10 ** decimals`` (``float`` on the wire)
    numeric : str
        Decimal string of the same amount

    """

    integer: str = Field(alias="int")
    decimals: int
    float_value: float = Field(alias="float")
    numeric: str


class Changes(ZerionModel):
    """One-day value change."""

    absolute_1d: float | None = None
    percent_1d: float | None = None


class Icon(ZerionModel):
    url: str


class Implementation(ZerionModel):
    chain_id: str
    address: str | None = None
    decimals: int


class FungibleInfo(ZerionModel):
    """Display metadata for a fungible token."""

    name: str
    symbol: str
    icon: Icon | None = None
    flags: dict[str, Any] = Field(default_factory=dict)
    implementations: list[Implementation] = Field(default_factory=list)


class PositionAttributes(ZerionModel):
    """
    Attributes of a Zerion position.

    ``protocol`` is ``None`` for plain wallet holdings. ``value``, ``price`` and
    ``changes`` may be absent when Zerion has no price for the token.
    Position types Zerion adds later are kept as plain strings.
    """

    parent: Any = None
    protocol: str | None = None
    name: str = "Asset"
    position_type: PositionType | str = Field(union_mode="left_to_right")
    quantity: Quantity
    value: float | None = None
    price: float | None = None
    changes: Changes | None = None
    fungible_info: FungibleInfo
    flags: dict[str, Any] = Field(default_factory=dict)
    updated_at: str | None = None
    updated_at_block: int | None = None


class RelationshipData(ZerionModel):
    type: str
    id: str


class Relationship(ZerionModel):
    links: dict[str, str] = Field(default_factory=dict)
    data: RelationshipData


class PositionRelationships(ZerionModel):
    chain: Relationship
    fungible: Relationship | None = None


class Position(ZerionModel):
    """A single Zerion position (wallet holding or protocol position)."""

    type: str
    id: str
    attributes: PositionAttributes
    relationships: PositionRelationships

    @property
    def chain(self) -> str:
        """Originating network identifier (e.g. ``ethereum``)."""
        return self.relationships.chain.data.id


class PositionsResponse(ZerionModel):
    links: dict[str, str] = Field(default_factory=dict)
    data: list[Position]


# ---------------------------------------------------------------------------
# Zapper: GET /v2/balances/apps
# ---------------------------------------------------------------------------


class ZapperModel(BaseModel):
    """Base for Zapper payload models (camelCase keys, immutable)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        frozen=True,
        populate_by_name=True,
    )


class BaseToken(ZapperModel):
    """Plain ERC-20 style token with its own balance."""

    type: Literal["base-token"] = "base-token"
    meta_type: str | None = None
    network: str
    address: str
    symbol: str
    decimals: int
    price: float | None = None
    balance: float | None = None
    balance_raw: str | None = None
    balance_usd: float | None = Field(default=None, alias="balanceUSD")


class AppToken(ZapperModel):
    """Token issued by an app (LP share, vault share), wrapping underlying tokens."""

    type: Literal["app-token"] = "app-token"
    key: str | None = None
    app_id: AppId | str = Field(union_mode="left_to_right")
    price: float | None = None
    supply: float | None = None
    symbol: str
    tokens: list["Token"] = Field(default_factory=list)
    address: str
    group_id: str | None = None
    network: str
    decimals: int
    data_props: Any = None


Token = Annotated[AppToken | BaseToken, Field(discriminator="type")]

AppToken.model_rebuild()


class AssetDataProps(ZapperModel):
    liquidity: float | None = None
    apy: float | None = None
    is_active: bool | None = None


class StatValue(ZapperModel):
    type: str
    value: float | str


class StatItem(ZapperModel):
    label: str
    value: StatValue


class DisplayProps(ZapperModel):
    """How Zapper suggests an asset be labelled and drawn."""

    label: str
    secondary_label: str | None = None
    tertiary_label: str | None = None
    images: list[str] = Field(default_factory=list)
    stats_items: list[StatItem] = Field(default_factory=list)


class Asset(ZapperModel):
    """
    A single position inside a Zapper product.

    Attributes
    ----------
    tokens : list[Token]
        Underlying tokens, either nested app tokens or base tokens
    balance : float | None
        Share balance, absent for contract positions
    balance_usd : float
        USD value of this position

    """

    key: str
    type: Literal["app-token", "contract-position"]
    app_id: AppId | str = Field(union_mode="left_to_right")
    group_id: str
    network: str
    address: str
    tokens: list[Token] = Field(default_factory=list)
    symbol: str | None = None
    decimals: int | None = None
    supply: float | None = None
    price_per_share: list[float] = Field(default_factory=list)
    price: float | None = None
    data_props: AssetDataProps = Field(default_factory=AssetDataProps)
    display_props: DisplayProps
    balance: float | None = None
    balance_raw: str | None = None
    balance_usd: float = Field(alias="balanceUSD")


class Product(ZapperModel):
    """Named group of assets within an app (e.g. "Pool", "Farm")."""

    label: str
    assets: list[Asset] = Field(default_factory=list)
    meta: list[Any] = Field(default_factory=list)


class App(ZapperModel):
    """
    One app integration's holdings for the wallet.

    ``balance_usd`` is Zapper's own total and is not reconciled with the
    sum of the product asset balances.
    """

    key: str | None = None
    address: str
    app_id: AppId | str = Field(union_mode="left_to_right")
    app_name: str
    app_image: str
    network: str
    updated_at: str | None = None
    balance_usd: float = Field(alias="balanceUSD")
    products: list[Product] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Merged view
# ---------------------------------------------------------------------------


class ViewModel(BaseModel):
    """
    Render-ready merge of both vendors.

    A field left as ``None`` means its source failed or had no match.

    Attributes
    ----------
    wallet_items : list[Position] | None
        Positions with ``position_type == wallet``
    uniswap_items : list[Position] | None
        Positions held through Uniswap V3
    bancor_items : list[Position] | None
        Positions held through Bancor
    balancer : App | None
        The aggregated app selected by its app id

    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    wallet_items: list[Position] | None = None
    uniswap_items: list[Position] | None = None
    bancor_items: list[Position] | None = None
    balancer: App | None = None

    def to_json(self) -> str:
        """Serialize with vendor field names, omitting absent sections."""
        return self.model_dump_json(indent=2, by_alias=True, exclude_unset=True)
