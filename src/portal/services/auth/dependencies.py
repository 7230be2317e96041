"""FastAPI dependencies wiring request state into the auth components."""

import logging

from fastapi import Depends, Request, Response, status
from fastapi.responses import RedirectResponse

from src.portal.services.auth.context import CookiePolicy, RequestContext
from src.portal.services.auth.gate import AuthorizationGate, redirect_path_for
from src.portal.services.auth.identity import IdentityProvider
from src.portal.services.auth.models import (
    GuardFailure,
    Ok,
    Result,
    RetailerAccess,
    Session,
)
from src.portal.services.auth.session_store import SessionStore
from src.portal.services.database.utils import SupabaseQueryBuilder

logger = logging.getLogger(__name__)


def get_request_context(request: Request, response: Response) -> RequestContext:
    """
    Build the cookie context for the current request.

    Cookies written through the context land on FastAPI's sub-response and
    are merged into whatever the handler returns, unless the handler returns
    a Response object directly.
    """
    policy: CookiePolicy = request.app.state.cookie_policy
    return RequestContext(request.cookies, response, policy)


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


def get_authorization_gate(request: Request) -> AuthorizationGate:
    return request.app.state.authorization_gate


def get_identity_provider(request: Request) -> IdentityProvider:
    return request.app.state.identity_provider


def get_admin_db(request: Request) -> SupabaseQueryBuilder:
    return request.app.state.admin_db


async def get_authenticated_session(
    request: Request,
    ctx: RequestContext = Depends(get_request_context),
    gate: AuthorizationGate = Depends(get_authorization_gate),
) -> Result[Session, GuardFailure]:
    """
    Run the "is authenticated" guard for a page handler.

    On success the session is stored on request.state for per-user rate
    limiting. The handler decides what to do with a failure.
    """
    result = await gate.require_authenticated(ctx)
    if isinstance(result, Ok):
        request.state.session = result.value
    return result


async def get_retailer_access(
    request: Request,
    ctx: RequestContext = Depends(get_request_context),
    gate: AuthorizationGate = Depends(get_authorization_gate),
) -> Result[RetailerAccess, GuardFailure]:
    """
    Run the "is an approved retailer" guard for a page handler.

    Example:
        @router.get("/dashboard")
        async def dashboard(access=Depends(get_retailer_access)):
            if isinstance(access, Err):
                return guard_redirect(access.error)
    """
    result = await gate.require_approved_retailer(ctx)
    if isinstance(result, Ok):
        request.state.session = result.value.session
    return result


def guard_redirect(failure: GuardFailure) -> RedirectResponse:
    """
    Turn a guard failure into the redirect the page should answer with.

    Authorization failures are routine states, so they redirect silently
    instead of rendering an error.
    """
    path = redirect_path_for(failure)
    logger.debug(f"Guard failure {failure.value}, redirecting to {path}")
    return RedirectResponse(url=path, status_code=status.HTTP_303_SEE_OTHER)

