"""Shared services module for external integrations."""

from src.portal.services.analytics.posthog import PostHogService

__all__ = [
    "PostHogService",
]
