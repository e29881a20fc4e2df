"""Turn the view model into render-ready table rows."""

from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict

from treasury_dashboard.core.models import App, Asset, Position, Product, ViewModel
from treasury_dashboard.presentation.formatting import (
    ChangeLabel,
    IconComposition,
    capitalize,
    classify_change,
    compose_icons,
    format_number,
    format_usd,
    initials,
)


class Row(BaseModel):
    model_config = ConfigDict(frozen=True)


class PositionRow(Row):
    """
    One Zerion position as a table row.

    Attributes
    ----------
    icon_url : str | None
        Token icon; ``initials`` is drawn instead when missing
    initials : str
        Fallback icon text
    name : str
        Token name
    subtitle : str
        Chain (and position type for pool rows)
    price : str | None
        Unit price, only set for wallet rows
    balance : str
        Amount with symbol
    value : str
        Total USD value, empty when unknown
    change : ChangeLabel | None
        One-day change, None when unknown

    """

    icon_url: str | None
    initials: str
    name: str
    subtitle: str
    price: str | None = None
    balance: str
    value: str
    change: ChangeLabel | None = None


class AppAssetRow(Row):
    label: str
    secondary_label: str | None = None
    tertiary_label: str | None = None
    icons: IconComposition
    balance: str
    value: str


class ProductSection(Row):
    """Assets of one product, highest value first, with their USD subtotal."""

    label: str
    subtotal_usd: float
    subtotal: str
    rows: list[AppAssetRow]


class AppSection(Row):
    name: str
    image: str
    network: str
    total: str
    products: list[ProductSection]


class DashboardRows(Row):
    """Everything the page template renders; ``None`` sections are skipped."""

    wallet: list[PositionRow] | None = None
    uniswap: list[PositionRow] | None = None
    bancor: list[PositionRow] | None = None
    app: AppSection | None = None


def _position_row(position: Position, subtitle: str, price: str | None) -> PositionRow:
    attributes = position.attributes
    fungible = attributes.fungible_info
    return PositionRow(
        icon_url=fungible.icon.url if fungible.icon else None,
        initials=initials(fungible.name),
        name=fungible.name,
        subtitle=subtitle,
        price=price,
        balance=f"{format_number(attributes.quantity.float_value, 3)} {fungible.symbol}",
        value=format_usd(attributes.value, 0),
        change=classify_change(attributes.changes),
    )


def asset_row(position: Position) -> PositionRow:
    """Row for the Wallet table (with unit price)."""
    return _position_row(
        position,
        subtitle=capitalize(position.chain),
        price=format_usd(position.attributes.price),
    )


def pool_row(position: Position) -> PositionRow:
    """Row for the protocol tables (Uniswap V3, Bancor)."""
    subtitle = f"{capitalize(position.chain)} · {capitalize(position.attributes.position_type)}"
    return _position_row(position, subtitle=subtitle, price=None)


def sort_assets(assets: Sequence[Asset]) -> list[Asset]:
    """Sort assets by USD balance, highest first; ties keep their order."""
    return sorted(assets, key=lambda asset: asset.balance_usd, reverse=True)


def app_asset_row(asset: Asset, app_image: str) -> AppAssetRow:
    display = asset.display_props
    return AppAssetRow(
        label=display.label,
        secondary_label=display.secondary_label,
        tertiary_label=display.tertiary_label,
        icons=compose_icons(display.images, app_image),
        balance=format_number(asset.balance),
        value=format_usd(asset.balance_usd),
    )


def product_section(product: Product, app_image: str) -> ProductSection:
    # Independent of App.balance_usd; the two totals are not reconciled
    subtotal = sum(asset.balance_usd for asset in product.assets)
    return ProductSection(
        label=product.label,
        subtotal_usd=subtotal,
        subtotal=format_usd(subtotal),
        rows=[app_asset_row(asset, app_image) for asset in sort_assets(product.assets)],
    )


def app_section(app: App) -> AppSection:
    return AppSection(
        name=app.app_name,
        image=app.app_image,
        network=capitalize(app.network),
        total=format_usd(app.balance_usd),
        products=[product_section(product, app.app_image) for product in app.products],
    )


def build_rows(view: ViewModel) -> DashboardRows:
    """
    Map the view model onto table rows, one row per item.

    Upstream order is kept for the position tables; app assets are sorted
    by USD balance within their product.
    """
    return DashboardRows(
        wallet=[asset_row(p) for p in view.wallet_items] if view.wallet_items is not None else None,
        uniswap=[pool_row(p) for p in view.uniswap_items] if view.uniswap_items is not None else None,
        bancor=[pool_row(p) for p in view.bancor_items] if view.bancor_items is not None else None,
        app=app_section(view.balancer) if view.balancer is not None else None,
    )
