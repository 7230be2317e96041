"""Authorization gate composing session, profile and retailer status checks."""

import logging

from src.portal.services import PostHogService
from src.portal.services.auth.context import RequestContext
from src.portal.services.auth.exceptions import TransientFailure
from src.portal.services.auth.models import Err, GuardFailure, Ok, Result, RetailerAccess, Session
from src.portal.services.auth.resolvers import ProfileResolver, RetailerStatusResolver
from src.portal.services.auth.session_store import SessionStore
from src.portal.services.database.models import RetailerStatus, UserRole

logger = logging.getLogger(__name__)

LOGIN_PATH = "/login"
PENDING_PATH = "/pending"
DASHBOARD_PATH = "/dashboard"

# Failures meaning "logged in but not yet entitled" land on the status page;
# everything else is sent back to sign-in.
_PENDING_FAILURES = {GuardFailure.NO_RETAILER_LINKED, GuardFailure.NOT_APPROVED}


def redirect_path_for(failure: GuardFailure) -> str:
    """
    Map a guard failure to the page the caller should be redirected to.

    Args:
        failure: Failure returned by the gate

    Returns:
        "/pending" for linked-but-unapproved accounts, "/login" otherwise
    """
    if failure in _PENDING_FAILURES:
        return PENDING_PATH
    return LOGIN_PATH


class AuthorizationGate:
    """
    Guards for protected surfaces.

    Nothing is cached between calls: every invocation re-verifies the token
    and re-reads the profile and retailer rows, so an admin rejecting a
    retailer takes effect on the retailer's next request. The lookups run
    sequentially since each depends on the previous result.

    Attributes:
        sessions: Cookie-backed session store
        profiles: Profile resolver
        retailers: Retailer status resolver

    Example:
        >>> result = await gate.require_approved_retailer(ctx)
        >>> if isinstance(result, Err):
        ...     return RedirectResponse(redirect_path_for(result.error), status_code=303)
        >>> retailer_id = result.value.retailer_id
    """

    def __init__(
        self,
        sessions: SessionStore,
        profiles: ProfileResolver,
        retailers: RetailerStatusResolver,
    ) -> None:
        self.sessions = sessions
        self.profiles = profiles
        self.retailers = retailers

    async def require_authenticated(self, ctx: RequestContext) -> Result[Session, GuardFailure]:
        """
        Require a valid session.

        Returns:
            Ok(Session), or Err(UNAUTHORIZED) / Err(TRANSIENT_FAILURE)
        """
        try:
            session = await self.sessions.read(ctx)
        except TransientFailure:
            return Err(GuardFailure.TRANSIENT_FAILURE)

        if session is None:
            return Err(GuardFailure.UNAUTHORIZED)

        return Ok(session)

    async def require_approved_retailer(
        self, ctx: RequestContext
    ) -> Result[RetailerAccess, GuardFailure]:
        """
        Require a valid session belonging to an approved retailer.

        Checks, in order: session, profile row, retailer role, linked
        retailer, and an exactly "approved" retailer status. A missing
        retailer row counts as not approved.

        Returns:
            Ok(RetailerAccess) or Err with the first failing check
        """
        authenticated = await self.require_authenticated(ctx)
        if isinstance(authenticated, Err):
            return authenticated

        session = authenticated.value
        try:
            profile = self.profiles.get_profile(session.subject_id)
            if profile is None:
                return self._deny(session, GuardFailure.PROFILE_MISSING)

            if profile.role != UserRole.RETAILER:
                return self._deny(session, GuardFailure.ROLE_DENIED)

            if not profile.retailer_id:
                return self._deny(session, GuardFailure.NO_RETAILER_LINKED)

            status = self.retailers.get_status(profile.retailer_id)
        except TransientFailure:
            return Err(GuardFailure.TRANSIENT_FAILURE)

        if status != RetailerStatus.APPROVED:
            return self._deny(session, GuardFailure.NOT_APPROVED)

        return Ok(RetailerAccess(session=session, profile=profile, retailer_id=profile.retailer_id))

    def _deny(self, session: Session, failure: GuardFailure) -> Err[GuardFailure]:
        logger.info(
            f"Retailer access denied for user {session.subject_id}: {failure.value}",
            extra={"user_id": session.subject_id, "reason": failure.value},
        )
        PostHogService().capture(
            distinct_id=session.subject_id,
            event="authorization_denied",
            properties={"reason": failure.value},
        )
        return Err(failure)
