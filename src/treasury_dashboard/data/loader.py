"""Dashboard configuration loader."""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "dashboard.yaml"


class VendorSettings(BaseModel):
    """
    Connection settings for one upstream API.

    Attributes
    ----------
    base_url : str
        API base URL
    api_key : str | None
        Credential, read from the environment only

    """

    model_config = ConfigDict(frozen=True)

    base_url: str
    api_key: str | None = Field(default=None, repr=False)


class Settings(BaseModel):
    """
    Runtime configuration for the dashboard.

    Attributes
    ----------
    title : str
        Page heading
    wallet_address : str
        Wallet whose positions are shown
    aggregated_app_id : str
        Zapper app id rendered in the aggregated-app section
    zerion : VendorSettings
        Zerion connection settings
    zapper : VendorSettings
        Zapper connection settings

    """

    model_config = ConfigDict(frozen=True)

    title: str = "VitaDAO Treasury"
    wallet_address: str
    aggregated_app_id: str = "balancer-v2"
    zerion: VendorSettings
    zapper: VendorSettings


def load_config_file(path: Path | None = None) -> dict[str, Any]:
    """
    Load dashboard defaults from a YAML file.

    Parameters
    ----------
    path : Path | None
        YAML file to read. Defaults to the bundled dashboard.yaml.

    Returns
    -------
    dict[str, Any]
        Parsed configuration

    """
    path = path or DEFAULT_CONFIG_PATH
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_settings(path: Path | None = None) -> Settings:
    """
    Build Settings from the YAML defaults and the environment.

    ``.env`` is loaded first, then ``DASHBOARD_CONFIG``,
    ``DASHBOARD_WALLET_ADDRESS``, ``ZERION_API_KEY`` and ``ZAPPER_API_KEY``
    override the file. A missing Zapper key is not an error here; the
    Zapper fetch fails softly instead.

    Parameters
    ----------
    path : Path | None
        YAML file to read

    Returns
    -------
    Settings
        Frozen settings

    """
    load_dotenv()

    if path is None and os.environ.get("DASHBOARD_CONFIG"):
        path = Path(os.environ["DASHBOARD_CONFIG"])

    config = load_config_file(path)

    wallet_address = os.environ.get("DASHBOARD_WALLET_ADDRESS") or config["wallet_address"]
    zerion_config = config.get("zerion", {})
    zapper_config = config.get("zapper", {})

    zapper_key = os.environ.get("ZAPPER_API_KEY") or None
    if not zapper_key:
        logger.warning("ZAPPER_API_KEY is not set; the aggregated app section will be empty")

    return Settings(
        title=config.get("title", "VitaDAO Treasury"),
        wallet_address=wallet_address,
        aggregated_app_id=config.get("aggregated_app_id", "balancer-v2"),
        zerion=VendorSettings(
            base_url=zerion_config.get("base_url", "https://api.zerion.io/v1"),
            api_key=os.environ.get("ZERION_API_KEY") or None,
        ),
        zapper=VendorSettings(
            base_url=zapper_config.get("base_url", "https://api.zapper.fi/v2"),
            api_key=zapper_key,
        ),
    )
