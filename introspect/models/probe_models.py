"""Value objects for the datastore connectivity probe."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Union

DEFAULT_DB_PORT = 3306


@dataclass(frozen=True)
class ConnectionConfig:
    host: str
    user: str
    password: str = field(repr=False)
    database: str
    port: int = DEFAULT_DB_PORT
    use_ssl: bool = False
    ssl_ca: Optional[str] = None


@dataclass(frozen=True)
class ProbeSuccess:
    server_time: datetime
    server_version: str


@dataclass(frozen=True)
class ConfigMissing:
    """No usable connection settings were supplied."""


@dataclass(frozen=True)
class ConnectionFailed:
    message: str


@dataclass(frozen=True)
class QueryFailed:
    message: str


ProbeOutcome = Union[ProbeSuccess, ConfigMissing, ConnectionFailed, QueryFailed]
