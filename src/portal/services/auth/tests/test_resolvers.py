"""Tests for the profile and retailer status resolvers."""

from unittest.mock import Mock

import httpx
import pytest

from src.portal.services.auth.exceptions import TransientFailure
from src.portal.services.auth.resolvers import ProfileResolver, RetailerStatusResolver
from src.portal.services.database.models import RetailerStatus


@pytest.fixture
def mock_db() -> Mock:
    """Query builder double with no rows."""
    db = Mock()
    db.get_by_id.return_value = None
    return db


class TestProfileResolver:
    """Tests for ProfileResolver."""

    def test_profile_found(self, mock_db):
        """Test that a profile row is returned as a UserProfile."""
        mock_db.get_by_id.return_value = {"id": "user-1", "role": "retailer", "retailer_id": "R1"}

        profile = ProfileResolver(mock_db).get_profile("user-1")

        assert profile is not None
        assert profile.role == "retailer"
        assert profile.retailer_id == "R1"
        mock_db.get_by_id.assert_called_once_with(
            "user_profiles", "user-1", columns="id, role, retailer_id"
        )

    def test_profile_not_found_is_none(self, mock_db):
        """Test that a subject without a profile row is a normal None outcome."""
        assert ProfileResolver(mock_db).get_profile("user-1") is None

    def test_lookup_failure_is_transient(self, mock_db):
        """Test that a failed lookup raises TransientFailure."""
        mock_db.get_by_id.side_effect = httpx.ReadTimeout("timed out")

        with pytest.raises(TransientFailure):
            ProfileResolver(mock_db).get_profile("user-1")


class TestRetailerStatusResolver:
    """Tests for RetailerStatusResolver."""

    @pytest.mark.parametrize("status", ["pending", "approved", "rejected"])
    def test_known_statuses(self, mock_db, status):
        """Test that stored statuses map onto RetailerStatus."""
        mock_db.get_by_id.return_value = {"id": "R1", "status": status}

        assert RetailerStatusResolver(mock_db).get_status("R1") == RetailerStatus(status)

    def test_retailer_not_found_is_none(self, mock_db):
        """Test that a deleted retailer yields None."""
        assert RetailerStatusResolver(mock_db).get_status("R1") is None

    def test_unknown_status_is_none(self, mock_db):
        """Test that an unrecognised status is not treated as approved."""
        mock_db.get_by_id.return_value = {"id": "R1", "status": "suspended"}

        assert RetailerStatusResolver(mock_db).get_status("R1") is None

    def test_lookup_failure_is_transient(self, mock_db):
        """Test that a failed lookup raises TransientFailure."""
        mock_db.get_by_id.side_effect = httpx.ConnectError("connection refused")

        with pytest.raises(TransientFailure):
            RetailerStatusResolver(mock_db).get_status("R1")
