"""API handlers for sign-in, registration and sign-out."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import RedirectResponse

from src.portal.features.accounts.models import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
)
from src.portal.services import PostHogService
from src.portal.services.auth.context import ACCESS_TOKEN_COOKIE, RequestContext
from src.portal.services.auth.dependencies import (
    get_authorization_gate,
    get_identity_provider,
    get_request_context,
    get_session_store,
)
from src.portal.services.auth.exceptions import (
    CredentialsRejectedError,
    RegistrationError,
    TransientFailure,
)
from src.portal.services.auth.gate import (
    DASHBOARD_PATH,
    LOGIN_PATH,
    AuthorizationGate,
    redirect_path_for,
)
from src.portal.services.auth.identity import IdentityProvider
from src.portal.services.auth.models import Ok
from src.portal.services.auth.session_store import SessionStore
from src.portal.services.rate_limiter import write_rate_limit

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8

router = APIRouter(prefix="/api/auth", tags=["accounts"])


@router.post("/login", response_model=LoginResponse)
@write_rate_limit
async def login(
    request: Request,
    req: LoginRequest,
    ctx: RequestContext = Depends(get_request_context),
    identity: IdentityProvider = Depends(get_identity_provider),
    store: SessionStore = Depends(get_session_store),
    gate: AuthorizationGate = Depends(get_authorization_gate),
) -> LoginResponse:
    """
    Sign in with email and password and open a session.

    The returned redirect target is status aware: approved retailers go to
    the dashboard, linked retailers awaiting review go to the pending page,
    and anything else goes back to sign-in.

    Raises:
        HTTPException: 401 with the provider's message if sign-in is rejected
        HTTPException: 500 if the identity provider is unavailable
    """
    try:
        credentials = identity.sign_in_with_password(req.email, req.password)
        created = await store.create(ctx, credentials.access_token, credentials.refresh_token)
    except CredentialsRejectedError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.message) from e
    except TransientFailure as e:
        logger.error(f"Sign-in failed, identity provider unavailable: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to authenticate. Please try again.",
        ) from e

    if not created:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Failed to authenticate. Please try again.",
        )

    access = await gate.require_approved_retailer(ctx)
    if isinstance(access, Ok):
        redirect_to = DASHBOARD_PATH
    else:
        redirect_to = redirect_path_for(access.error)

    return LoginResponse(success=True, redirect_to=redirect_to)


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
@write_rate_limit
async def register(
    request: Request,
    req: RegisterRequest,
    identity: IdentityProvider = Depends(get_identity_provider),
) -> RegisterResponse:
    """
    Register a new retailer account.

    Creates the auth user, then the retailer and its profile link through
    the create_retailer_account database function. The retailer starts in
    "pending" and cannot reach the dashboard until an admin approves it.

    Raises:
        HTTPException: 400 if passwords mismatch, are too short, or sign-up fails
        HTTPException: 500 if the identity provider is unavailable
    """
    if req.password != req.confirm_password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Passwords do not match")

    if len(req.password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
        )

    try:
        result = identity.register_retailer(
            email=req.email,
            password=req.password,
            business_name=req.business_name,
            website_url=req.website_url,
            commission=req.commission,
        )
    except RegistrationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    except TransientFailure as e:
        logger.error(f"Registration failed, identity provider unavailable: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create account. Please try again.",
        ) from e

    PostHogService().capture(
        distinct_id=result["user_id"],
        event="retailer_registered",
        properties={"business_name": req.business_name},
    )

    return RegisterResponse()


@router.post("/logout")
async def logout(
    request: Request,
    store: SessionStore = Depends(get_session_store),
    identity: IdentityProvider = Depends(get_identity_provider),
) -> RedirectResponse:
    """Revoke the session, clear the cookies and send the browser to sign-in."""
    response = RedirectResponse(url=LOGIN_PATH, status_code=status.HTTP_303_SEE_OTHER)
    ctx = RequestContext(request.cookies, response, request.app.state.cookie_policy)

    access_token = ctx.get(ACCESS_TOKEN_COOKIE)
    if access_token:
        identity.sign_out(access_token)

    store.destroy(ctx)
    return response
