"""API handlers for session creation and deletion."""

import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import ValidationError

from src.portal.features.session.models import SessionCreateRequest, SessionResponse
from src.portal.services import PostHogService
from src.portal.services.auth.context import ACCESS_TOKEN_COOKIE, RequestContext
from src.portal.services.auth.dependencies import (
    get_identity_provider,
    get_request_context,
    get_session_store,
)
from src.portal.services.auth.exceptions import TransientFailure
from src.portal.services.auth.identity import IdentityProvider
from src.portal.services.auth.session_store import SessionStore
from src.portal.services.rate_limiter import write_rate_limit

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["session"])


async def _read_credentials(request: Request) -> SessionCreateRequest | None:
    # Parsed by hand so malformed bodies get the same 400 as missing tokens
    try:
        return SessionCreateRequest.model_validate(await request.json())
    except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
        logger.warning(f"Unreadable session request body: {e}")
        return None


@router.post("/session", response_model=SessionResponse)
@write_rate_limit
async def create_session(
    request: Request,
    ctx: RequestContext = Depends(get_request_context),
    store: SessionStore = Depends(get_session_store),
) -> SessionResponse:
    """
    Turn a client-side credential pair into session cookies.

    Expects a JSON object {"accessToken": ..., "refreshToken": ...}
    (snake_case names are accepted too).

    Args:
        request: Incoming request carrying the credential pair
        ctx: Cookie context for this request
        store: Session store

    Returns:
        {"success": true}, with the session cookie pair set

    Raises:
        HTTPException: 400 if the body is unreadable or either token is missing
        HTTPException: 401 if the access token is rejected
        HTTPException: 500 if the provider is unreachable or an unexpected error occurs
    """
    payload = await _read_credentials(request)
    if payload is None or not payload.access_token or not payload.refresh_token:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing tokens")

    try:
        created = await store.create(ctx, payload.access_token, payload.refresh_token)
    except TransientFailure as e:
        logger.error(f"Session creation failed, identity provider unavailable: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        ) from e
    except Exception as e:
        logger.error(f"Session creation error: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        ) from e

    if not created:
        PostHogService().capture(
            distinct_id="anonymous",
            event="authentication_failed",
            properties={"error": "session_token_rejected"},
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Failed to create session",
        )

    return SessionResponse(success=True)


@router.delete("/session", response_model=SessionResponse)
async def delete_session(
    ctx: RequestContext = Depends(get_request_context),
    store: SessionStore = Depends(get_session_store),
    identity: IdentityProvider = Depends(get_identity_provider),
) -> SessionResponse:
    """
    Sign out (logout). Succeeds whether or not a session exists.

    The session is revoked at the identity provider when the request still
    carries an access token, then both cookies are cleared. A failed
    revocation does not fail the logout.

    Raises:
        HTTPException: 500 if the cookies could not be cleared
    """
    access_token = ctx.get(ACCESS_TOKEN_COOKIE)
    if access_token:
        identity.sign_out(access_token)

    try:
        store.destroy(ctx)
    except Exception as e:
        logger.error(f"Session deletion error: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        ) from e

    return SessionResponse(success=True)
