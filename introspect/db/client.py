"""
Connectivity probe for the MySQL-compatible datastore.

Each probe opens exactly one connection, runs one diagnostic query and
closes the connection before returning, whatever the outcome.
"""
import asyncio
import ssl
from typing import Any, Dict, Optional

import pymysql
import pymysql.cursors

from introspect.models.probe_models import (
    ConnectionConfig,
    ConnectionFailed,
    ProbeOutcome,
    ProbeSuccess,
    QueryFailed,
)
from introspect.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT_MS = 5000
# UTC_TIMESTAMP keeps db.now independent of the server session time zone
DIAGNOSTIC_QUERY = "SELECT UTC_TIMESTAMP(3) AS now, @@version AS version"


def _connect_kwargs(config: ConnectionConfig, timeout_ms: int) -> Dict[str, Any]:
    timeout_s = timeout_ms / 1000
    kwargs: Dict[str, Any] = {
        "host": config.host,
        "port": config.port,
        "user": config.user,
        "password": config.password,
        "database": config.database,
        "connect_timeout": timeout_s,
        "read_timeout": timeout_s,
        "write_timeout": timeout_s,
        "cursorclass": pymysql.cursors.DictCursor,
    }
    if config.use_ssl:
        # Verifies the server certificate and hostname
        kwargs["ssl"] = ssl.create_default_context(cafile=config.ssl_ca)
    return kwargs


def _release(conn) -> None:
    try:
        conn.close()
    except Exception as exc:
        logger.warning(f"Ignoring error while closing datastore connection: {exc}")


def _probe_sync(config: ConnectionConfig, timeout_ms: int) -> ProbeOutcome:
    target = f"{config.host}:{config.port}/{config.database}"
    conn: Optional[pymysql.connections.Connection] = None
    try:
        try:
            conn = pymysql.connect(**_connect_kwargs(config, timeout_ms))
        except Exception as exc:
            # Socket, TLS and CA file errors can escape pymysql.MySQLError
            logger.warning(f"Datastore connection to {target} failed: {exc}")
            return ConnectionFailed(message=str(exc))

        try:
            with conn.cursor() as cursor:
                cursor.execute(DIAGNOSTIC_QUERY)
                row = cursor.fetchone()
        except pymysql.MySQLError as exc:
            logger.warning(f"Diagnostic query on {target} failed: {exc}")
            return QueryFailed(message=str(exc))

        if not row:
            return QueryFailed(message="Diagnostic query returned no rows")

        logger.debug(f"Datastore {target} reachable, version {row['version']}")
        return ProbeSuccess(server_time=row["now"], server_version=str(row["version"]))
    finally:
        if conn is not None:
            _release(conn)


async def probe(config: ConnectionConfig, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> ProbeOutcome:
    """
    Run a single connectivity probe against the datastore.

    The blocking driver runs in a worker thread so other requests keep being
    served. If the awaiting task is cancelled the thread still runs to
    completion and closes its connection.

    Args:
        config: Resolved connection settings
        timeout_ms: Bound for opening the connection and for the query round trip

    Returns:
        ProbeSuccess, ConnectionFailed or QueryFailed
    """
    return await asyncio.to_thread(_probe_sync, config, timeout_ms)


class ConnectivityProber:
    """Callable wrapper so routes can receive the probe through Depends."""

    def __init__(self, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> None:
        self.timeout_ms = timeout_ms

    async def __call__(self, config: ConnectionConfig) -> ProbeOutcome:
        return await probe(config, timeout_ms=self.timeout_ms)
