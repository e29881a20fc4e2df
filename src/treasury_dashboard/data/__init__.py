"""Configuration loading."""

from treasury_dashboard.data.loader import (
    DEFAULT_CONFIG_PATH,
    Settings,
    VendorSettings,
    load_config_file,
    load_settings,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "Settings",
    "VendorSettings",
    "load_config_file",
    "load_settings",
]
