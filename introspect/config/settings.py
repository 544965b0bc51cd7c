import os
import platform
import socket
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from introspect.models.probe_models import DEFAULT_DB_PORT, ConnectionConfig
from introspect.models.service_models import ServiceMetadata
from introspect.utils.logger import get_logger, is_valid_level

logger = get_logger(__name__)

BASE_DIR = Path(__file__).resolve().parent.parent.parent
ENV_PATH = BASE_DIR / ".env"

REQUIRED_DB_VARS = ("DB_HOST", "DB_USER", "DB_PASSWORD", "DB_NAME")
DEFAULT_CONNECT_TIMEOUT_MS = 5000


class ConfigurationError(ValueError):
    """Raised when a datastore setting is present but unusable."""


def _is_true(raw: Optional[str]) -> bool:
    return (raw or "").strip().lower() == "true"


def resolve_connection_config(environ: Optional[Mapping[str, str]] = None) -> Optional[ConnectionConfig]:
    """
    Build the datastore connection settings from environment values.

    Returns None when any of DB_HOST, DB_USER, DB_PASSWORD or DB_NAME is
    missing or blank. A partial configuration is never returned.

    Raises:
        ConfigurationError: If DB_PORT is set but is not a port number
    """
    env = os.environ if environ is None else environ

    values = {name: (env.get(name) or "").strip() for name in REQUIRED_DB_VARS}
    missing = [name for name, value in values.items() if not value]
    if missing:
        logger.debug(f"Datastore config absent, missing: {', '.join(missing)}")
        return None

    port_raw = (env.get("DB_PORT") or "").strip()
    if port_raw:
        try:
            port = int(port_raw)
        except ValueError as exc:
            raise ConfigurationError(f"DB_PORT={port_raw!r} is not an integer.") from exc
        if not 0 < port < 65536:
            raise ConfigurationError(f"DB_PORT={port} is outside 1..65535.")
    else:
        port = DEFAULT_DB_PORT

    return ConnectionConfig(
        host=values["DB_HOST"],
        port=port,
        user=values["DB_USER"],
        password=values["DB_PASSWORD"],
        database=values["DB_NAME"],
        use_ssl=_is_true(env.get("DB_SSL")),
        ssl_ca=(env.get("DB_SSL_CA") or "").strip() or None,
    )


class Settings:
    # Read once at startup; handlers receive this instance, never os.environ.
    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        if environ is None:
            # .env is optional; real environment variables win over it
            if ENV_PATH.exists():
                load_dotenv(dotenv_path=ENV_PATH, override=False)
            environ = os.environ

        port_raw = (environ.get("PORT") or "80").strip()
        self.PORT = int(port_raw)
        if not 0 < self.PORT < 65536:
            raise ValueError("PORT must be between 1 and 65535.")

        self.APP_VERSION = (environ.get("APP_VERSION") or "").strip() or "local"
        self.GIT_SHA = (environ.get("GIT_SHA") or "").strip() or "unknown"
        self.FEATURE_NEW_UI = _is_true(environ.get("FEATURE_NEW_UI"))
        self.LOG_LEVEL = (environ.get("LOG_LEVEL") or "").strip().upper() or "INFO"
        if not is_valid_level(self.LOG_LEVEL):
            raise ValueError("LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL.")

        timeout_raw = (environ.get("DB_CONNECT_TIMEOUT_MS") or "").strip()
        self.DB_CONNECT_TIMEOUT_MS = int(timeout_raw) if timeout_raw else DEFAULT_CONNECT_TIMEOUT_MS
        if self.DB_CONNECT_TIMEOUT_MS <= 0:
            raise ValueError("DB_CONNECT_TIMEOUT_MS must be a positive integer.")

        # A malformed DB_PORT must not stop the service; /db reports it instead
        self.DB_CONFIG_ERROR: Optional[str] = None
        try:
            self.DB_CONFIG = resolve_connection_config(environ)
        except ConfigurationError as exc:
            logger.warning(f"Datastore config unusable: {exc}")
            self.DB_CONFIG = None
            self.DB_CONFIG_ERROR = str(exc)

        self.METADATA = ServiceMetadata(
            app_version=self.APP_VERSION,
            git_sha=self.GIT_SHA,
            hostname=socket.gethostname(),
            runtime=f"{platform.python_implementation()} {platform.python_version()}",
            feature_new_ui=self.FEATURE_NEW_UI,
        )
