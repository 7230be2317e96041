"""Session and authorization module for the retailer portal."""

from src.portal.services.auth.context import CookiePolicy, RequestContext
from src.portal.services.auth.exceptions import (
    AuthenticationError,
    CredentialsRejectedError,
    RegistrationError,
    TransientFailure,
)
from src.portal.services.auth.gate import AuthorizationGate, redirect_path_for
from src.portal.services.auth.identity import IdentityProvider
from src.portal.services.auth.jwks import JWKSCache
from src.portal.services.auth.jwt_validator import JWTValidator
from src.portal.services.auth.models import (
    Err,
    GuardFailure,
    Ok,
    RetailerAccess,
    Session,
    VerificationFailure,
)
from src.portal.services.auth.resolvers import ProfileResolver, RetailerStatusResolver
from src.portal.services.auth.session_store import SessionStore
from src.portal.services.auth.verifier import JWTTokenVerifier, SupabaseTokenVerifier

__all__ = [
    "AuthenticationError",
    "AuthorizationGate",
    "CookiePolicy",
    "CredentialsRejectedError",
    "Err",
    "GuardFailure",
    "IdentityProvider",
    "JWKSCache",
    "JWTTokenVerifier",
    "JWTValidator",
    "Ok",
    "ProfileResolver",
    "RegistrationError",
    "RequestContext",
    "RetailerAccess",
    "RetailerStatusResolver",
    "Session",
    "SessionStore",
    "SupabaseTokenVerifier",
    "TransientFailure",
    "VerificationFailure",
    "redirect_path_for",
]
