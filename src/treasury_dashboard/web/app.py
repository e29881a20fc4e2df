"""FastAPI application serving the treasury dashboard.

Routes:
- GET /               - the dashboard page (always 200, failed vendors just hide sections)
- GET /api/view-model - the merged view model as JSON
"""

import logging
from pathlib import Path

import httpx
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.responses import HTMLResponse, Response
from fastapi.templating import Jinja2Templates

from treasury_dashboard import __version__
from treasury_dashboard.core.aggregator import DashboardAggregator
from treasury_dashboard.data.loader import Settings, load_settings
from treasury_dashboard.presentation.rows import build_rows

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

router = APIRouter()


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_aggregator(request: Request, settings: Settings = Depends(get_settings)) -> DashboardAggregator:
    """One aggregator per request; nothing is shared between renders."""
    return DashboardAggregator(settings, transport=request.app.state.transport)


@router.get("/", response_class=HTMLResponse)
async def dashboard(
    request: Request,
    settings: Settings = Depends(get_settings),
    aggregator: DashboardAggregator = Depends(get_aggregator),
):
    view = await aggregator.build_view()
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "title": settings.title,
            "wallet_address": settings.wallet_address,
            "view_json": view.to_json(),
            "rows": build_rows(view),
        },
    )


@router.get("/api/view-model")
async def view_model(aggregator: DashboardAggregator = Depends(get_aggregator)) -> Response:
    view = await aggregator.build_view()
    return Response(content=view.to_json(), media_type="application/json")


def create_app(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """
    Build the dashboard application.

    Parameters
    ----------
    settings : Settings | None
        Configuration; loaded from dashboard.yaml and the environment when omitted
    transport : httpx.AsyncBaseTransport | None
        Transport handed to the vendor clients

    Returns
    -------
    FastAPI
        Configured application

    """
    settings = settings or load_settings()

    app = FastAPI(
        title=settings.title,
        description="Wallet positions from Zerion and Zapper",
        version=__version__,
    )
    app.state.settings = settings
    app.state.transport = transport
    app.include_router(router)

    logger.info("Dashboard configured for wallet %s", settings.wallet_address)
    return app
