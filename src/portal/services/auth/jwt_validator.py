"""Local JWT verification using JWKS for signature validation."""

import logging
from typing import Any

import httpx
from jose import JWTError, jwt

from src.portal.services.auth.jwks import JWKSCache

logger = logging.getLogger(__name__)

SUPPORTED_ALGORITHMS = ["RS256", "ES256"]


class JWTValidator:
    """
    Verifies Supabase access tokens without a per-request network call.

    Validates signature, expiration, issuer and audience. Network access only
    happens when the JWKS cache needs to load or rotate signing keys.

    Attributes:
        jwks_cache: JWKS cache instance for fetching signing keys
        issuer: Expected issuer (iss claim), the Supabase auth URL
        audience: Expected audience (aud claim), typically "authenticated"
        leeway: Clock skew tolerance in seconds
    """

    def __init__(
        self,
        jwks_cache: JWKSCache,
        issuer: str,
        audience: str = "authenticated",
        leeway: int = 10,
    ):
        self.jwks_cache = jwks_cache
        self.issuer = issuer
        self.audience = audience
        self.leeway = leeway

    async def verify_token(self, token: str) -> dict[str, Any]:
        """
        Verify JWT token and return claims.

        Args:
            token: JWT token string (the raw cookie value)

        Returns:
            Dictionary of verified claims (sub, email, exp, iat, iss, aud, ...)

        Raises:
            JWTError: If the token is malformed, expired, signed by an unknown
                key or fails signature verification
            httpx.HTTPError: If signing keys could not be fetched
        """
        try:
            unverified_header = jwt.get_unverified_header(token)
            kid = unverified_header.get("kid")

            if not kid:
                raise JWTError("JWT header missing 'kid' (key ID)")

            signing_key = await self.jwks_cache.get_signing_key(kid)

            claims = jwt.decode(
                token,
                signing_key,
                algorithms=SUPPORTED_ALGORITHMS,
                audience=self.audience,
                issuer=self.issuer,
                options={
                    "verify_signature": True,
                    "verify_exp": True,
                    "verify_nbf": True,
                    "verify_iat": True,
                    "verify_aud": True,
                    "verify_iss": True,
                    "require_exp": True,
                    "require_iat": True,
                    "leeway": self.leeway,
                },
            )

            logger.debug(
                "JWT verified successfully",
                extra={"user_id": claims.get("sub"), "kid": kid, "exp": claims.get("exp")},
            )

            return claims

        except JWTError as e:
            logger.warning(
                f"JWT verification failed: {e}",
                extra={"error_type": "jwt_verification_failed", "error": str(e)},
            )
            raise

        except httpx.HTTPError:
            raise

        except ValueError as e:
            # Unknown key ID after a JWKS refresh
            logger.warning(f"JWT signing key lookup failed: {e}")
            raise JWTError(str(e)) from e
