"""Pydantic DTOs for the introspection routes."""

from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel

from introspect.models.base import MODEL_CONFIG


@dataclass(frozen=True)
class ServiceMetadata:
    """Build identity captured once at startup."""

    app_version: str
    git_sha: str
    hostname: str
    runtime: str
    feature_new_ui: bool


class HealthResponse(BaseModel):
    model_config = MODEL_CONFIG

    ok: bool = True
    ts: str


class VersionResponse(BaseModel):
    model_config = MODEL_CONFIG

    app_version: str
    git_sha: str
    hostname: str
    runtime: str
    ts: str


class FeatureResponse(BaseModel):
    model_config = MODEL_CONFIG

    feature_new_ui: bool
    message: str


class DbInfo(BaseModel):
    """Server clock (UTC, same format as /health ts) and version string."""

    model_config = MODEL_CONFIG

    now: str
    version: str


class DbCheckResponse(BaseModel):
    """Result of a single /db probe; exactly one of db or error is set."""

    model_config = MODEL_CONFIG

    ok: bool
    db: Optional[DbInfo] = None
    error: Optional[str] = None
