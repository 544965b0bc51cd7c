"""
One-shot datastore connectivity check from the command line.
Uses the same DB_* environment variables as the /db endpoint.
"""
import argparse
import asyncio
import json
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from introspect.config.settings import Settings
from introspect.db.client import probe
from introspect.models.probe_models import ConfigMissing, ConnectionFailed
from introspect.services.formatter import format_outcome, render_body
from introspect.utils.logger import configure_logging, setup_logger

logger = setup_logger(__name__, level="INFO")


async def check_db(timeout_ms: int | None = None) -> int:
    """
    Probe the datastore once and print the JSON body.

    Returns:
        Process exit status: 0 when the datastore answered, 1 otherwise
    """
    settings = Settings()
    configure_logging(settings.LOG_LEVEL)
    config = settings.DB_CONFIG

    if settings.DB_CONFIG_ERROR:
        outcome = ConnectionFailed(message=settings.DB_CONFIG_ERROR)
    elif config is None:
        outcome = ConfigMissing()
    else:
        timeout = timeout_ms or settings.DB_CONNECT_TIMEOUT_MS
        logger.info(f"Probing {config.host}:{config.port}/{config.database} (timeout {timeout} ms)")
        outcome = await probe(config, timeout_ms=timeout)

    status_code, body = format_outcome(outcome)
    print(json.dumps(render_body(body), indent=2))
    logger.info(f"Result: HTTP-equivalent status {status_code}")
    return 0 if status_code == 200 else 1


def main():
    """Parse arguments and run the check."""
    parser = argparse.ArgumentParser(
        description="Check connectivity to the configured MySQL-compatible datastore"
    )
    parser.add_argument(
        "--timeout-ms",
        type=int,
        default=None,
        help="Connect/query timeout in milliseconds (default: DB_CONNECT_TIMEOUT_MS or 5000)",
    )

    args = parser.parse_args()
    if args.timeout_ms is not None and args.timeout_ms <= 0:
        parser.error("--timeout-ms must be a positive integer")

    sys.exit(asyncio.run(check_db(timeout_ms=args.timeout_ms)))


if __name__ == "__main__":
    main()
