"""Profile and retailer status lookups for the authorization gate."""

import logging

import httpx
from supabase import PostgrestAPIError

from src.portal.services.auth.exceptions import TransientFailure
from src.portal.services.database.models import RetailerStatus, UserProfile
from src.portal.services.database.utils import SupabaseQueryBuilder

logger = logging.getLogger(__name__)


class ProfileResolver:
    """Maps a subject ID to its user_profiles row."""

    def __init__(self, db: SupabaseQueryBuilder) -> None:
        self.db = db

    def get_profile(self, subject_id: str) -> UserProfile | None:
        """
        Fetch the profile for a subject.

        A subject can exist in the identity provider before its profile row
        does, so a missing row is returned as None rather than raised.

        Args:
            subject_id: Identity-provider user ID

        Returns:
            UserProfile or None if no row exists

        Raises:
            TransientFailure: If the lookup could not be completed
        """
        try:
            row = self.db.get_by_id("user_profiles", subject_id, columns="id, role, retailer_id")
        except (PostgrestAPIError, httpx.HTTPError) as e:
            logger.error(f"Profile lookup failed for user {subject_id}: {e}")
            raise TransientFailure(str(e)) from e

        if row is None:
            return None

        return UserProfile(**row)


class RetailerStatusResolver:
    """Maps a retailer ID to its approval status."""

    def __init__(self, db: SupabaseQueryBuilder) -> None:
        self.db = db

    def get_status(self, retailer_id: str) -> RetailerStatus | None:
        """
        Fetch the approval status of a retailer.

        Returns:
            RetailerStatus, or None if the retailer row is missing or carries
            a status this service does not recognise

        Raises:
            TransientFailure: If the lookup could not be completed
        """
        try:
            row = self.db.get_by_id("retailers", retailer_id, columns="id, status")
        except (PostgrestAPIError, httpx.HTTPError) as e:
            logger.error(f"Retailer lookup failed for retailer {retailer_id}: {e}")
            raise TransientFailure(str(e)) from e

        if row is None:
            return None

        try:
            return RetailerStatus(row.get("status"))
        except ValueError:
            logger.warning(
                f"Unknown status {row.get('status')!r} for retailer {retailer_id}",
                extra={"retailer_id": retailer_id},
            )
            return None
