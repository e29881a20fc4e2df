"""Core data models."""

from treasury_dashboard.core.models import (
    App,
    AppId,
    Asset,
    Position,
    PositionType,
    Product,
    TrackedProtocol,
    ViewModel,
)

__all__ = [
    "App",
    "AppId",
    "Asset",
    "Position",
    "PositionType",
    "Product",
    "TrackedProtocol",
    "ViewModel",
]
