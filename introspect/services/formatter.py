"""Maps probe outcomes to HTTP status codes and response bodies."""

from typing import Any, Dict, Tuple

from introspect.models.probe_models import (
    ConfigMissing,
    ConnectionFailed,
    ProbeOutcome,
    ProbeSuccess,
    QueryFailed,
)
from introspect.models.service_models import DbCheckResponse, DbInfo
from introspect.services.base import format_utc

MISSING_CONFIG_MESSAGE = (
    "Missing DB env vars. Set DB_HOST, DB_USER, DB_PASSWORD, DB_NAME (and optionally DB_PORT)."
)


def format_outcome(outcome: ProbeOutcome) -> Tuple[int, DbCheckResponse]:
    """
    Translate a probe outcome into (status_code, body).

    Raises:
        TypeError: If the value is not one of the probe outcome types
    """
    if isinstance(outcome, ProbeSuccess):
        db = DbInfo(now=format_utc(outcome.server_time), version=outcome.server_version)
        return 200, DbCheckResponse(ok=True, db=db)
    if isinstance(outcome, ConfigMissing):
        return 400, DbCheckResponse(ok=False, error=MISSING_CONFIG_MESSAGE)
    if isinstance(outcome, (ConnectionFailed, QueryFailed)):
        return 500, DbCheckResponse(ok=False, error=outcome.message)
    raise TypeError(f"Unsupported probe outcome: {type(outcome).__name__}")


def render_body(response: DbCheckResponse) -> Dict[str, Any]:
    return response.model_dump(mode="json", exclude_none=True)
