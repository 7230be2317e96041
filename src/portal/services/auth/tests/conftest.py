"""Shared fixtures for session and authorization tests."""

from unittest.mock import Mock

import pytest
from starlette.responses import Response

from src.portal.services.auth.context import CookiePolicy, RequestContext


@pytest.fixture
def cookie_policy() -> CookiePolicy:
    """Cookie attributes as configured outside local development."""
    return CookiePolicy(max_age=60 * 60 * 24 * 7, secure=True)


@pytest.fixture
def make_ctx(cookie_policy):
    """Factory for request contexts over a given incoming cookie jar."""

    def _make(cookies: dict[str, str] | None = None) -> RequestContext:
        return RequestContext(cookies or {}, Response(), cookie_policy)

    return _make


@pytest.fixture
def mock_profiles() -> Mock:
    """Profile resolver double."""
    return Mock()


@pytest.fixture
def mock_retailers() -> Mock:
    """Retailer status resolver double."""
    return Mock()
