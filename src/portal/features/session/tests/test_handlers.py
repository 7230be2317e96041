"""Tests for session API handlers."""

import pytest
from fastapi.testclient import TestClient

from src.portal.conftest import VALID_ACCESS_TOKEN, VALID_REFRESH_TOKEN
from src.portal.services.auth.exceptions import TransientFailure


def set_cookie_headers(response, name: str) -> list[str]:
    return [h for h in response.headers.get_list("set-cookie") if h.startswith(f"{name}=")]


class TestCreateSessionEndpoint:
    """Tests for POST /api/auth/session endpoint."""

    def test_create_session_sets_cookie_pair(self, client: TestClient, portal_state) -> None:
        """Test that a valid token pair is stored as two HttpOnly cookies."""
        response = client.post(
            "/api/auth/session",
            json={"accessToken": VALID_ACCESS_TOKEN, "refreshToken": VALID_REFRESH_TOKEN},
        )

        assert response.status_code == 200
        assert response.json() == {"success": True}

        access = set_cookie_headers(response, "sb-access-token")
        refresh = set_cookie_headers(response, "sb-refresh-token")
        assert len(access) == 1
        assert len(refresh) == 1
        assert VALID_ACCESS_TOKEN in access[0]
        assert VALID_REFRESH_TOKEN in refresh[0]
        for header in access + refresh:
            assert "HttpOnly" in header
            assert "Max-Age=604800" in header
            assert "Path=/" in header
            assert "SameSite=lax" in header

    def test_create_session_accepts_snake_case(self, client: TestClient, portal_state) -> None:
        """Test that snake_case field names are accepted too."""
        response = client.post(
            "/api/auth/session",
            json={"access_token": VALID_ACCESS_TOKEN, "refresh_token": VALID_REFRESH_TOKEN},
        )

        assert response.status_code == 200

    def test_missing_refresh_token(self, client: TestClient, portal_state) -> None:
        """Test that a missing token is a 400 and the verifier is never called."""
        response = client.post("/api/auth/session", json={"accessToken": VALID_ACCESS_TOKEN})

        assert response.status_code == 400
        assert response.json()["detail"] == "Missing tokens"
        assert response.headers.get_list("set-cookie") == []
        portal_state.session_store.verifier.verify.assert_not_awaited()

    def test_empty_body(self, client: TestClient, portal_state) -> None:
        """Test that an empty JSON object is a 400."""
        response = client.post("/api/auth/session", json={})

        assert response.status_code == 400

    def test_empty_access_token(self, client: TestClient, portal_state) -> None:
        """Test that an empty string counts as missing."""
        response = client.post(
            "/api/auth/session", json={"accessToken": "", "refreshToken": VALID_REFRESH_TOKEN}
        )

        assert response.status_code == 400

    @pytest.mark.parametrize(
        "body",
        [
            "not json",
            '{"accessToken": 5, "refreshToken": "valid-refresh-token"}',
            "[]",
            '"valid-access-token"',
            "",
        ],
        ids=["not-json", "wrong-type", "array", "string", "empty"],
    )
    def test_malformed_body(self, client: TestClient, portal_state, body) -> None:
        """Test that unreadable bodies get the same 400 as missing tokens."""
        response = client.post(
            "/api/auth/session",
            content=body,
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Missing tokens"
        portal_state.session_store.verifier.verify.assert_not_awaited()

    def test_rejected_token(self, client: TestClient, portal_state) -> None:
        """Test that a rejected access token is a 401 with no cookies written."""
        response = client.post(
            "/api/auth/session",
            json={"accessToken": "forged-token", "refreshToken": VALID_REFRESH_TOKEN},
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Failed to create session"
        assert response.headers.get_list("set-cookie") == []

    def test_provider_unavailable(self, client: TestClient, portal_state) -> None:
        """Test that an unreachable identity provider is a 500."""
        portal_state.session_store.verifier.verify.side_effect = TransientFailure("timeout")

        response = client.post(
            "/api/auth/session",
            json={"accessToken": VALID_ACCESS_TOKEN, "refreshToken": VALID_REFRESH_TOKEN},
        )

        assert response.status_code == 500
        assert response.json()["detail"] == "Internal server error"


class TestDeleteSessionEndpoint:
    """Tests for DELETE /api/auth/session endpoint."""

    def test_delete_session_clears_cookies(self, signed_in_client: TestClient) -> None:
        """Test that both session cookies are expired."""
        response = signed_in_client.delete("/api/auth/session")

        assert response.status_code == 200
        assert response.json() == {"success": True}
        for name in ("sb-access-token", "sb-refresh-token"):
            headers = set_cookie_headers(response, name)
            assert len(headers) == 1
            assert "Max-Age=0" in headers[0]

    def test_delete_session_without_cookies(self, client: TestClient, portal_state) -> None:
        """Test that logging out without a session still succeeds."""
        response = client.delete("/api/auth/session")

        assert response.status_code == 200
        assert response.json() == {"success": True}

    def test_delete_session_is_idempotent(self, signed_in_client: TestClient) -> None:
        """Test that a second logout behaves like the first."""
        first = signed_in_client.delete("/api/auth/session")
        second = signed_in_client.delete("/api/auth/session")

        assert first.status_code == second.status_code == 200

    def test_delete_session_revokes_at_provider(self, signed_in_client: TestClient) -> None:
        """Test that logout signs the session out at the identity provider."""
        identity = signed_in_client.app.state.identity_provider

        signed_in_client.delete("/api/auth/session")

        identity.sign_out.assert_called_once_with(VALID_ACCESS_TOKEN)

    def test_delete_session_survives_failed_revocation(self, signed_in_client: TestClient) -> None:
        """Test that logout still clears cookies when the provider refuses sign-out."""
        signed_in_client.app.state.identity_provider.sign_out.return_value = False

        response = signed_in_client.delete("/api/auth/session")

        assert response.status_code == 200
        assert len(set_cookie_headers(response, "sb-access-token")) == 1

    def test_delete_session_without_cookies_skips_provider(
        self, client: TestClient, portal_state
    ) -> None:
        """Test that no provider call is made without a session."""
        client.delete("/api/auth/session")

        portal_state.identity_provider.sign_out.assert_not_called()
