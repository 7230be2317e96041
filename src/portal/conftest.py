"""Pytest configuration and shared fixtures."""

import os

os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("ENVIRONMENT", "development")

from unittest.mock import AsyncMock, Mock  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from src.portal.main import app  # noqa: E402
from src.portal.services.auth.context import CookiePolicy  # noqa: E402
from src.portal.services.auth.gate import AuthorizationGate  # noqa: E402
from src.portal.services.auth.models import (  # noqa: E402
    Err,
    Ok,
    Session,
    VerificationFailure,
)
from src.portal.services.auth.resolvers import ProfileResolver, RetailerStatusResolver  # noqa: E402
from src.portal.services.auth.session_store import SessionStore  # noqa: E402

TEST_USER_ID = "123e4567-e89b-12d3-a456-426614174000"
TEST_EMAIL = "owner@retailer.com"
TEST_RETAILER_ID = "R1"
VALID_ACCESS_TOKEN = "valid-access-token"
VALID_REFRESH_TOKEN = "valid-refresh-token"


@pytest.fixture
def client() -> TestClient:
    """
    Provide FastAPI test client for API testing.

    The lifespan does not run, so tests that hit auth-protected routes also
    request the ``portal_state`` fixture.
    """
    return TestClient(app)


@pytest.fixture
def mock_verifier() -> Mock:
    """Token verifier that accepts only VALID_ACCESS_TOKEN."""

    async def verify(access_token: str):
        if access_token == VALID_ACCESS_TOKEN:
            return Ok(Session(subject_id=TEST_USER_ID, email=TEST_EMAIL))
        return Err(VerificationFailure.INVALID)

    verifier = Mock()
    verifier.verify = AsyncMock(side_effect=verify)
    return verifier


@pytest.fixture
def tables() -> dict[str, dict[str, dict]]:
    """In-memory rows keyed by table then id, seeded with an approved retailer."""
    return {
        "user_profiles": {
            TEST_USER_ID: {"id": TEST_USER_ID, "role": "retailer", "retailer_id": TEST_RETAILER_ID},
        },
        "retailers": {
            TEST_RETAILER_ID: {
                "id": TEST_RETAILER_ID,
                "status": "approved",
                "business_name": "Corner Store",
            },
        },
    }


@pytest.fixture
def mock_db(tables) -> Mock:
    """Query builder double serving keyed reads from ``tables``."""

    def get_by_id(table, record_id, columns="*"):
        return tables.get(table, {}).get(str(record_id))

    db = Mock()
    db.get_by_id.side_effect = get_by_id
    db.list_records.return_value = []
    return db


@pytest.fixture
def portal_state(mock_verifier, mock_db):
    """Install real session store and gate, over test doubles, on app.state."""
    store = SessionStore(mock_verifier)
    app.state.cookie_policy = CookiePolicy(max_age=60 * 60 * 24 * 7, secure=False)
    app.state.admin_db = mock_db
    app.state.session_store = store
    app.state.authorization_gate = AuthorizationGate(
        sessions=store,
        profiles=ProfileResolver(mock_db),
        retailers=RetailerStatusResolver(mock_db),
    )
    app.state.identity_provider = Mock()
    yield app.state
    app.dependency_overrides = {}


@pytest.fixture
def signed_in_client(client: TestClient, portal_state) -> TestClient:
    """Test client carrying a valid session cookie pair."""
    client.cookies.set("sb-access-token", VALID_ACCESS_TOKEN)
    client.cookies.set("sb-refresh-token", VALID_REFRESH_TOKEN)
    return client
