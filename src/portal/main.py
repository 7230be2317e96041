"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from functools import partial

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from src.portal.config import Settings, settings
from src.portal.features.accounts.handlers import router as accounts_router
from src.portal.features.dashboard.handlers import router as dashboard_router
from src.portal.features.home.handlers import router as home_router
from src.portal.features.pending.handlers import router as pending_router
from src.portal.features.session.handlers import router as session_router
from src.portal.services.auth import (
    AuthorizationGate,
    CookiePolicy,
    IdentityProvider,
    JWKSCache,
    JWTTokenVerifier,
    JWTValidator,
    ProfileResolver,
    RetailerStatusResolver,
    SessionStore,
    SupabaseTokenVerifier,
)
from src.portal.services.database import (
    SupabaseQueryBuilder,
    create_supabase_admin_client,
    create_supabase_client,
)
from src.portal.services.rate_limiter import limiter

logger = logging.getLogger(__name__)


def build_components(app: FastAPI, config: Settings) -> JWKSCache | None:
    """
    Construct the auth components and attach them to app.state.

    Returns:
        The JWKS cache when local JWT verification is enabled, so the caller
        can close it on shutdown
    """
    client = create_supabase_client(config)
    admin_db = SupabaseQueryBuilder(create_supabase_admin_client(config))

    jwks_cache = None
    if config.use_local_jwt_verification:
        jwks_url = f"{config.auth_url}/.well-known/jwks.json"
        jwks_cache = JWKSCache(jwks_url=jwks_url, cache_ttl=config.jwks_cache_ttl_seconds)
        verifier = JWTTokenVerifier(
            JWTValidator(
                jwks_cache=jwks_cache,
                issuer=config.auth_url,
                audience=config.jwt_audience,
                leeway=config.jwt_leeway_seconds,
            )
        )
    else:
        verifier = SupabaseTokenVerifier(client)

    session_store = SessionStore(verifier)

    app.state.cookie_policy = CookiePolicy(
        max_age=config.session_max_age_seconds, secure=config.cookie_secure
    )
    app.state.admin_db = admin_db
    app.state.session_store = session_store
    app.state.authorization_gate = AuthorizationGate(
        sessions=session_store,
        profiles=ProfileResolver(admin_db),
        retailers=RetailerStatusResolver(admin_db),
    )
    app.state.identity_provider = IdentityProvider(
        client_factory=partial(create_supabase_client, config),
        admin_db=admin_db,
        email_redirect_url=f"{config.site_url}/login",
    )
    return jwks_cache


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle (startup and shutdown)."""
    try:
        jwks_cache = build_components(app, settings)
        if jwks_cache is not None:
            await jwks_cache.refresh_keys()

        logger.info(
            "Auth components initialized",
            extra={
                "supabase_url": settings.supabase_url,
                "local_jwt_verification": settings.use_local_jwt_verification,
                "secure_cookies": settings.cookie_secure,
            },
        )
    except Exception as e:
        logger.error(
            f"Failed to initialize auth components: {e}",
            exc_info=True,
            extra={"error_type": "auth_init_failed"},
        )
        raise

    yield

    if jwks_cache is not None:
        try:
            await jwks_cache.close()
        except Exception as e:
            logger.error(f"Error during JWKS cache cleanup: {e}", exc_info=True)


app = FastAPI(
    title="Retailer Portal API",
    description="Registration, sign-in and deal submission for retailers",
    version="0.1.0",
    debug=settings.debug,
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

origins = settings.cors_origins.split(",")
logger.info(f"Origins : {origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE"],
    allow_headers=["Content-Type"],
)

app.include_router(home_router)
app.include_router(session_router)
app.include_router(accounts_router)
app.include_router(pending_router)
app.include_router(dashboard_router)


class HealthCheckResponse(BaseModel):
    """Health check response."""

    status: str


@app.get("/health", response_model=HealthCheckResponse)
async def health_check() -> HealthCheckResponse:
    """Health check endpoint."""
    return HealthCheckResponse(status="healthy")
