"""
Core pytest configuration for the entire test suite.

This module only holds what every kind of test needs (environment, logging,
the HTTP client). Domain fixtures live in:
- tests/test_fixtures/store_fixtures.py       (in-memory database double)
- tests/test_fixtures/repository_fixtures.py  (settings, repositories, services, sample payloads)

No MongoDB server is needed: the store double raises the same pymongo errors a
server would, so the error pipeline is exercised end to end.
"""

from __future__ import annotations

# -------------------------------
# Standard library imports
# -------------------------------
import logging
import os

# -------------------------------
# Early logging tuning (IMPORTANT)
# -------------------------------
# Keep this block above the crudkit imports so collection stays quiet.
NOISY_LOGGERS = (
    "faker",
    "faker.factory",
    "pymongo",
    "asyncio",
    "httpx",
    "urllib3",
)
for _name in NOISY_LOGGERS:
    logging.getLogger(_name).setLevel(logging.WARNING)

# Anything that falls back to get_settings() during a test run must see the
# test database, never a developer one.
os.environ.setdefault("ENV", "testing")
os.environ.setdefault("TESTING", "true")
os.environ.setdefault("TEST_MONGO_DB", "crudkit_test")
os.environ.setdefault("LOG_TO_STDOUT", "true")

# -------------------------------
# Third-party / project imports
# -------------------------------
import pytest
from fastapi.testclient import TestClient

from crudkit.config.settings import Settings
from crudkit.core.logging.builder import setup_logging

logger = logging.getLogger(__name__)


@pytest.fixture(scope="session", autouse=True)
def configure_logging():
    """
    Install application logging once for the whole session, so formatters and
    filters (request_id, redact) are active exactly as in the app. pytest's
    caplog handler is attached per test on top of this.
    """
    setup_logging(
        Settings(_env_file=None, ENV="testing", LOG_LEVEL="DEBUG", LOG_FORMAT="text", LOG_TO_STDOUT=True)
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    yield


@pytest.fixture
def app(database, test_settings):
    from crudkit.main import create_app

    return create_app(settings=test_settings, database=database)


@pytest.fixture
def client(app):
    """
    TestClient running the app lifespan. Server errors are rendered by our
    handlers instead of being re-raised into the test.
    """
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def register_and_login(client, sample_user_data):
    """
    Register the sample user, log in, and return the Authorization headers.
    """
    def _login(**overrides) -> dict[str, str]:
        payload = {**sample_user_data, **overrides}
        client.post("/api/v1/users/register", json=payload)
        resp = client.post(
            "/api/v1/users/login",
            json={"email": payload["email"], "password": payload["password"]},
        )
        token = resp.json()["data"]["access_token"]
        return {"Authorization": f"Bearer {token}"}

    return _login


# Store / repository fixtures
from .test_fixtures.store_fixtures import database  # noqa: E402,F401
from .test_fixtures.repository_fixtures import (  # noqa: E402,F401
    test_settings,
    item_repo,
    user_repository,
    product_repository,
    user_service,
    product_service,
    sample_user_data,
    sample_product_data,
    create_item,
    many_items,
    created_product,
)
