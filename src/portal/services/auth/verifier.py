"""Access token verification against the identity provider."""

import logging
from typing import Protocol

import httpx
from jose import JWTError
from supabase import AuthRetryableError, Client

from src.portal.services.auth.exceptions import TransientFailure
from src.portal.services.auth.jwt_validator import JWTValidator
from src.portal.services.auth.models import Err, Ok, Result, Session, VerificationFailure

logger = logging.getLogger(__name__)

VerifyResult = Result[Session, VerificationFailure]


class TokenVerifier(Protocol):
    """Resolves an access token to a subject identity."""

    async def verify(self, access_token: str) -> VerifyResult: ...


class SupabaseTokenVerifier:
    """
    Verifies access tokens by asking Supabase Auth who they belong to.

    Every call is a round trip to the provider; results are never cached, so
    revoked tokens stop working on the next request.

    Attributes:
        client: Supabase client (anon key) constructed at startup

    Example:
        >>> verifier = SupabaseTokenVerifier(client)
        >>> result = await verifier.verify(access_token)
        >>> if isinstance(result, Ok):
        ...     print(result.value.subject_id)
    """

    def __init__(self, client: Client) -> None:
        self.client = client

    async def verify(self, access_token: str) -> VerifyResult:
        """
        Resolve an access token to the session it represents.

        Args:
            access_token: Opaque bearer credential from the session cookie

        Returns:
            Ok(Session) for a live token, Err(VerificationFailure.INVALID) otherwise

        Raises:
            TransientFailure: If Supabase could not be reached
        """
        try:
            response = self.client.auth.get_user(access_token)
        except (AuthRetryableError, httpx.TransportError) as e:
            logger.error(
                f"Identity provider unreachable during token verification: {e}",
                extra={"error_type": "verifier_unreachable"},
            )
            raise TransientFailure(str(e)) from e
        except Exception as e:
            logger.warning(
                f"Token verification failed: {e}",
                extra={"error_type": "token_invalid"},
            )
            return Err(VerificationFailure.INVALID)

        user = response.user if response is not None else None
        if user is None or not user.id:
            logger.warning(
                "Token verification failed: no subject",
                extra={"error_type": "missing_subject"},
            )
            return Err(VerificationFailure.INVALID)

        return Ok(Session(subject_id=str(user.id), email=user.email))


class JWTTokenVerifier:
    """
    Verifies access tokens locally against the provider's published JWKS.

    Only signing keys are cached (by the underlying JWKS cache); each token is
    fully re-verified on every call.

    Attributes:
        validator: JWT validator configured with issuer and audience
    """

    def __init__(self, validator: JWTValidator) -> None:
        self.validator = validator

    async def verify(self, access_token: str) -> VerifyResult:
        """
        Resolve an access token to the session it represents.

        Raises:
            TransientFailure: If the JWKS endpoint could not be reached
        """
        try:
            claims = await self.validator.verify_token(access_token)
        except httpx.HTTPError as e:
            raise TransientFailure(str(e)) from e
        except (JWTError, ValueError):
            return Err(VerificationFailure.INVALID)

        subject = claims.get("sub")
        if not subject:
            logger.warning(
                "Token verification failed: missing 'sub' claim",
                extra={"error_type": "missing_sub_claim"},
            )
            return Err(VerificationFailure.INVALID)

        return Ok(Session(subject_id=str(subject), email=claims.get("email")))
