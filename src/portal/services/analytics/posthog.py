"""PostHog analytics service for event tracking."""

import posthog

from src.portal.config import settings


class PostHogService:
    """Service for tracking analytics events via PostHog."""

    def __init__(self) -> None:
        """Initialize PostHog service."""
        if settings.posthog_api_key:
            posthog.api_key = settings.posthog_api_key
            posthog.host = settings.posthog_host

    def capture(self, distinct_id: str, event: str, properties: dict | None = None) -> None:
        """
        Track an event.

        Args:
            distinct_id: Unique identifier for the user
            event: Event name (e.g., "session_created", "deal_submitted")
            properties: Optional event properties

        Example:
            >>> service = PostHogService()
            >>> service.capture(
            ...     "user-123",
            ...     "authorization_denied",
            ...     {"reason": "not_approved"}
            ... )
        """
        if not settings.posthog_api_key:
            return

        posthog.capture(distinct_id=distinct_id, event=event, properties=properties or {})
