"""Cookie-backed session persistence."""

import logging

from src.portal.services import PostHogService
from src.portal.services.auth.context import (
    ACCESS_TOKEN_COOKIE,
    REFRESH_TOKEN_COOKIE,
    RequestContext,
)
from src.portal.services.auth.models import Ok, Session
from src.portal.services.auth.verifier import TokenVerifier

logger = logging.getLogger(__name__)


class SessionStore:
    """
    Persists a verified credential pair as two browser cookies.

    The cookie pair is the only server-side representation of a session.
    Both cookies are written or removed together, and a request carrying
    only one of them is treated as having no session.

    Attributes:
        verifier: Token verifier consulted on create and read

    Example:
        >>> store = SessionStore(verifier)
        >>> if await store.create(ctx, access_token, refresh_token):
        ...     session = await store.read(ctx)
    """

    def __init__(self, verifier: TokenVerifier) -> None:
        self.verifier = verifier

    async def create(self, ctx: RequestContext, access_token: str, refresh_token: str) -> bool:
        """
        Verify an access token and, only if it is valid, write the cookie pair.

        Args:
            ctx: Request context receiving the cookies
            access_token: Access token from client-side sign-in
            refresh_token: Matching refresh token

        Returns:
            True if the session cookies were written, False otherwise

        Raises:
            TransientFailure: If the identity provider could not be reached
        """
        result = await self.verifier.verify(access_token)
        if not isinstance(result, Ok):
            logger.warning("Session not created: access token rejected")
            return False

        try:
            ctx.set(ACCESS_TOKEN_COOKIE, access_token)
            ctx.set(REFRESH_TOKEN_COOKIE, refresh_token)
        except Exception as e:
            logger.error(f"Failed to write session cookies: {e}", exc_info=True)
            # Never leave half a pair behind
            ctx.delete(ACCESS_TOKEN_COOKIE)
            ctx.delete(REFRESH_TOKEN_COOKIE)
            return False

        subject_id = result.value.subject_id
        logger.info(f"Session created for user {subject_id}")
        PostHogService().capture(distinct_id=subject_id, event="session_created")
        return True

    def destroy(self, ctx: RequestContext) -> None:
        """Delete both session cookies. Safe to call without a session."""
        ctx.delete(ACCESS_TOKEN_COOKIE)
        ctx.delete(REFRESH_TOKEN_COOKIE)

    async def read(self, ctx: RequestContext) -> Session | None:
        """
        Reconstruct the session from the request cookies.

        Returns None without contacting the provider unless both cookies are
        present. Cookies holding a rejected token are left in place.

        Raises:
            TransientFailure: If the identity provider could not be reached
        """
        access_token = ctx.get(ACCESS_TOKEN_COOKIE)
        refresh_token = ctx.get(REFRESH_TOKEN_COOKIE)

        if access_token is None or refresh_token is None:
            return None

        result = await self.verifier.verify(access_token)
        if isinstance(result, Ok):
            return result.value

        return None
