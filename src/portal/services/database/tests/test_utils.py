"""Tests for database utility functions."""

from unittest.mock import MagicMock

import pytest

from src.portal.services.database.utils import SupabaseQueryBuilder


@pytest.fixture
def mock_client() -> MagicMock:
    """Mock Supabase client."""
    return MagicMock()


class TestSupabaseQueryBuilder:
    """Tests for SupabaseQueryBuilder class."""

    def test_get_by_id_found(self, mock_client: MagicMock) -> None:
        """Test getting record by ID when it exists."""
        query = mock_client.table.return_value.select.return_value.eq.return_value
        query.limit.return_value.execute.return_value.data = [{"id": "R1", "status": "approved"}]

        builder = SupabaseQueryBuilder(mock_client)
        result = builder.get_by_id("retailers", "R1", columns="id, status")

        assert result == {"id": "R1", "status": "approved"}
        mock_client.table.assert_called_once_with("retailers")
        mock_client.table.return_value.select.assert_called_once_with("id, status")
        mock_client.table.return_value.select.return_value.eq.assert_called_once_with("id", "R1")

    def test_get_by_id_not_found(self, mock_client: MagicMock) -> None:
        """Test getting record by ID when it doesn't exist."""
        mock_client.table().select().eq().limit().execute.return_value.data = []

        builder = SupabaseQueryBuilder(mock_client)

        assert builder.get_by_id("user_profiles", "missing") is None

    def test_list_records_with_filters_and_order(self, mock_client: MagicMock) -> None:
        """Test listing records with filters and ascending order."""
        query = mock_client.table.return_value.select.return_value
        query.eq.return_value.order.return_value.execute.return_value.data = [
            {"id": "c1", "name": "Electronics"}
        ]

        builder = SupabaseQueryBuilder(mock_client)
        result = builder.list_records(
            "categories", filters={"is_active": True}, order_by="name", order_desc=False
        )

        assert result == [{"id": "c1", "name": "Electronics"}]
        query.eq.assert_called_once_with("is_active", True)
        query.eq.return_value.order.assert_called_once_with("name", desc=False)

    def test_insert_record(self, mock_client: MagicMock) -> None:
        """Test inserting a record returns the stored row."""
        mock_client.table().insert().execute.return_value.data = [{"id": "d1", "status": "pending"}]

        builder = SupabaseQueryBuilder(mock_client)
        result = builder.insert_record("deals", {"title": "20% off", "status": "pending"})

        assert result == {"id": "d1", "status": "pending"}

    def test_call_rpc(self, mock_client: MagicMock) -> None:
        """Test calling a database function returns its payload."""
        mock_client.rpc.return_value.execute.return_value.data = {"retailer_id": "R1"}

        builder = SupabaseQueryBuilder(mock_client)
        result = builder.call_rpc("create_retailer_account", {"p_user_id": "user-1"})

        assert result == {"retailer_id": "R1"}
        mock_client.rpc.assert_called_once_with("create_retailer_account", {"p_user_id": "user-1"})

    def test_call_rpc_failure_propagates(self, mock_client: MagicMock) -> None:
        """Test that RPC errors are raised to the caller."""
        mock_client.rpc.return_value.execute.side_effect = Exception("permission denied")

        builder = SupabaseQueryBuilder(mock_client)

        with pytest.raises(Exception, match="permission denied"):
            builder.call_rpc("create_retailer_account", {})
