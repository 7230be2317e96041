"""Generic database utility functions for Supabase interactions."""

import logging
from typing import Any
from uuid import UUID

from supabase import Client

logger = logging.getLogger(__name__)


class SupabaseQueryBuilder:
    """Helper class for building and executing Supabase queries."""

    def __init__(self, client: Client) -> None:
        """
        Initialize query builder.

        Args:
            client: Supabase client instance constructed at startup
        """
        self.client = client

    def get_by_id(
        self, table: str, record_id: UUID | str, columns: str = "*"
    ) -> dict[str, Any] | None:
        """
        Fetch a single record by ID.

        Args:
            table: Table name
            record_id: Record UUID or ID
            columns: Columns to select (default: "*")

        Returns:
            Record dictionary or None if not found

        Example:
            >>> builder = SupabaseQueryBuilder(client)
            >>> retailer = builder.get_by_id("retailers", retailer_id, columns="id, status")
        """
        response = (
            self.client.table(table).select(columns).eq("id", str(record_id)).limit(1).execute()
        )
        return response.data[0] if response.data else None

    def list_records(
        self,
        table: str,
        columns: str = "*",
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        order_desc: bool = True,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        """
        List records with optional filtering, ordering, and pagination.

        Args:
            table: Table name
            columns: Columns to select (default: "*")
            filters: Dictionary of field:value pairs for filtering
            order_by: Column to order by
            order_desc: Order descending (default: True)
            limit: Maximum records to return
            offset: Number of records to skip

        Returns:
            List of record dictionaries

        Example:
            >>> builder = SupabaseQueryBuilder(client)
            >>> categories = builder.list_records(
            ...     "categories",
            ...     filters={"is_active": True},
            ...     order_by="name",
            ...     order_desc=False,
            ... )
        """
        query = self.client.table(table).select(columns)

        if filters:
            for field, value in filters.items():
                query = query.eq(field, value)

        if order_by:
            query = query.order(order_by, desc=order_desc)

        if limit is not None:
            query = query.range(offset, offset + limit - 1)

        response = query.execute()
        return response.data

    def insert_record(self, table: str, data: dict[str, Any]) -> dict[str, Any] | None:
        """
        Insert a single record.

        Args:
            table: Table name
            data: Record data dictionary

        Returns:
            Inserted record dictionary or None if failed

        Raises:
            Exception: If insert operation fails

        Example:
            >>> builder = SupabaseQueryBuilder(client)
            >>> deal = builder.insert_record(
            ...     "deals",
            ...     {"retailer_id": retailer_id, "title": "20% off", "status": "pending"}
            ... )
        """
        response = self.client.table(table).insert(data).execute()
        return response.data[0] if response.data else None

    def call_rpc(self, function: str, params: dict[str, Any]) -> Any:
        """
        Call a PostgreSQL function through Supabase RPC.

        Args:
            function: Database function name
            params: Named function arguments

        Returns:
            The function's result payload

        Raises:
            Exception: If the function call fails

        Example:
            >>> builder = SupabaseQueryBuilder(admin_client)
            >>> builder.call_rpc("create_retailer_account", {"p_user_id": user_id, ...})
        """
        try:
            result = self.client.rpc(function, params).execute()
            return result.data
        except Exception as e:
            logger.error(f"RPC {function} failed: {e}")
            raise
