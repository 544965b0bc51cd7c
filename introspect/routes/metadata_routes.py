"""Banner, build metadata and feature flag endpoints."""

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from introspect.config.settings import Settings
from introspect.models.service_models import FeatureResponse, VersionResponse
from introspect.routes.deps import get_settings
from introspect.services.base import utc_timestamp

router = APIRouter(tags=["metadata"])

BANNER_TITLE = "ECS + RDS + GitHub Actions Demo"
ENDPOINT_DIRECTORY = [
    "Endpoints:",
    "  /health   -> health check",
    "  /version  -> build metadata",
    "  /feature  -> feature flag demo",
    "  /db       -> DB connectivity check (requires env vars)",
]


def _flag(value: bool) -> str:
    return "true" if value else "false"


@router.get("/", response_class=PlainTextResponse, summary="Service banner")
async def banner(settings: Settings = Depends(get_settings)) -> str:
    meta = settings.METADATA
    lines = [
        BANNER_TITLE,
        f"hostname={meta.hostname}",
        f"version={meta.app_version}",
        f"git_sha={meta.git_sha}",
        f"feature_new_ui={_flag(meta.feature_new_ui)}",
        "",
        *ENDPOINT_DIRECTORY,
    ]
    return "\n".join(lines)


@router.get("/version", response_model=VersionResponse, summary="Build metadata")
async def version(settings: Settings = Depends(get_settings)) -> VersionResponse:
    meta = settings.METADATA
    return VersionResponse(
        app_version=meta.app_version,
        git_sha=meta.git_sha,
        hostname=meta.hostname,
        runtime=meta.runtime,
        ts=utc_timestamp(),
    )


@router.get("/feature", response_model=FeatureResponse, summary="Feature flag state")
async def feature(settings: Settings = Depends(get_settings)) -> FeatureResponse:
    enabled = settings.METADATA.feature_new_ui
    if enabled:
        message = "New UI enabled (feature flag ON)"
    else:
        message = "New UI disabled (feature flag OFF)"
    return FeatureResponse(feature_new_ui=enabled, message=message)
