# tests/conftest.py
import asyncio
import os
from pathlib import Path

import pytest

_TEST_DB = Path(__file__).parent / "hoozin_test.db"
if _TEST_DB.exists():
    _TEST_DB.unlink()

# Must be set before hoozin settings are first read.
os.environ["DB_URL"] = f"sqlite+aiosqlite:///{_TEST_DB}"
os.environ.setdefault("APP_ENV", "test")

from fastapi.testclient import TestClient  # noqa: E402

from hoozin.db.session import reset_db  # noqa: E402
from hoozin.main import create_app  # noqa: E402


@pytest.fixture(scope="session")
def client() -> TestClient:
    """
    Shared TestClient fixture for all API tests.

    Uses the application factory so startup (schema creation and cache
    purge) runs exactly as in production.
    """
    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def clean_db(client):
    """
    Drop and recreate every table so a test starts with an empty cache
    and no stored settings.
    """
    asyncio.run(reset_db())
    yield
