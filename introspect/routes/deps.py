"""Request-scoped providers shared by the route modules."""

from fastapi import Request

from introspect.config.settings import Settings
from introspect.db.client import ConnectivityProber


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_prober(request: Request) -> ConnectivityProber:
    """Provide a prober bound to the configured timeout, one per request."""
    settings: Settings = request.app.state.settings
    return ConnectivityProber(timeout_ms=settings.DB_CONNECT_TIMEOUT_MS)
