import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Ensure the repo root is on sys.path so tests can import `introspect.*`
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from introspect.config.settings import Settings  # noqa: E402
from introspect.main import create_app  # noqa: E402

DB_ENV = {
    "DB_HOST": "db.internal",
    "DB_USER": "app",
    "DB_PASSWORD": "s3cret",
    "DB_NAME": "appdb",
}


@pytest.fixture
def make_client():
    """Build a TestClient around an app created from an explicit environment."""

    def _make(environ: dict[str, str]) -> TestClient:
        return TestClient(create_app(Settings(environ=environ)))

    return _make
