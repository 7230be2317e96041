"""JWKS (JSON Web Key Set) fetching and caching for JWT verification."""

import logging
from datetime import datetime, timezone

import httpx
from jose import jwk
from jose.backends.base import Key

logger = logging.getLogger(__name__)

KEY_TYPE_ALGORITHMS = {"EC": "ES256", "RSA": "RS256"}


class JWKSCache:
    """
    Caches the identity provider's public signing keys.

    Keys are refreshed when the TTL expires or when a token names a key ID
    that is not cached yet (key rotation).

    Attributes:
        jwks_url: URL of the provider's /.well-known/jwks.json
        cache_ttl: Cache time-to-live in seconds
    """

    def __init__(self, jwks_url: str, cache_ttl: int = 3600, http_client: httpx.AsyncClient | None = None):
        self.jwks_url = jwks_url
        self.cache_ttl = cache_ttl
        self._keys: dict[str, Key] = {}
        self._last_refresh: datetime | None = None
        self._http_client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(10.0, read=30.0, connect=10.0, write=10.0)
        )

    async def get_signing_key(self, kid: str) -> Key:
        """
        Get signing key by key ID (kid), refreshing once on a miss.

        Raises:
            ValueError: If key ID not found after refresh
            httpx.HTTPError: If JWKS fetch fails
        """
        if self._needs_refresh():
            await self.refresh_keys()

        key = self._keys.get(kid)

        if key is None:
            logger.warning(
                f"Key ID '{kid}' not found in cache, refreshing JWKS",
                extra={"kid": kid, "cached_kids": list(self._keys.keys())},
            )
            await self.refresh_keys()
            key = self._keys.get(kid)

        if key is None:
            raise ValueError(f"Key ID '{kid}' not found in JWKS")

        return key

    async def refresh_keys(self) -> None:
        """
        Fetch JWKS from Supabase and replace the cached keys.

        Raises:
            httpx.HTTPError: If HTTP request fails
        """
        logger.info(f"Fetching JWKS from {self.jwks_url}")
        try:
            response = await self._http_client.get(self.jwks_url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(
                f"Failed to fetch JWKS from {self.jwks_url}: {e}",
                exc_info=True,
                extra={"error_type": "jwks_fetch_failed"},
            )
            raise

        new_keys: dict[str, Key] = {}
        for key_data in response.json().get("keys", []):
            kid = key_data.get("kid")
            if not kid:
                logger.warning("JWKS key missing 'kid', skipping")
                continue

            algorithm = KEY_TYPE_ALGORITHMS.get(key_data.get("kty"), key_data.get("alg", "RS256"))
            new_keys[kid] = jwk.construct(key_data, algorithm=algorithm)

        if not new_keys:
            logger.warning(
                "JWKS response contains no keys; token verification will fail until keys are published",
                extra={"jwks_url": self.jwks_url},
            )

        self._keys = new_keys
        self._last_refresh = datetime.now(timezone.utc)

        logger.info(
            "JWKS cache refreshed",
            extra={"key_count": len(new_keys), "key_ids": list(new_keys.keys())},
        )

    def _needs_refresh(self) -> bool:
        if self._last_refresh is None:
            return True

        age = (datetime.now(timezone.utc) - self._last_refresh).total_seconds()
        return age >= self.cache_ttl

    async def close(self) -> None:
        """Close HTTP client. Called during application shutdown."""
        await self._http_client.aclose()
        logger.info("JWKS cache closed")
