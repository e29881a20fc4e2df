"""HTTP entry point for the dashboard."""

from treasury_dashboard.web.app import create_app

__all__ = ["create_app"]
