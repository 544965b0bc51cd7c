"""Datastore connectivity endpoint."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from introspect.config.settings import Settings
from introspect.db.client import ConnectivityProber
from introspect.models.probe_models import ConfigMissing, ConnectionFailed, QueryFailed
from introspect.routes.deps import get_prober, get_settings
from introspect.services.formatter import format_outcome, render_body
from introspect.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["db"])


@router.get("/db", summary="Datastore connectivity check")
async def db_check(
    settings: Settings = Depends(get_settings),
    prober: ConnectivityProber = Depends(get_prober),
) -> JSONResponse:
    """
    Probe the configured datastore once.

    Returns:
        200 with server time and version, 400 when DB_* settings are absent,
        500 when the datastore cannot be reached or queried, or DB_PORT is malformed
    """
    config = settings.DB_CONFIG
    if settings.DB_CONFIG_ERROR:
        outcome = ConnectionFailed(message=settings.DB_CONFIG_ERROR)
    elif config is None:
        outcome = ConfigMissing()
    else:
        try:
            outcome = await prober(config)
        except Exception as exc:
            logger.error(f"Unexpected error probing {config.host}:{config.port}: {exc}", exc_info=True)
            outcome = QueryFailed(message=str(exc) or type(exc).__name__)

    status_code, body = format_outcome(outcome)
    logger.info(f"DB check completed with status {status_code}")
    return JSONResponse(status_code=status_code, content=render_body(body))
