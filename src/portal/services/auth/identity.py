"""Password sign-in and retailer sign-up against Supabase Auth."""

import logging
import re
from collections.abc import Callable
from typing import Any

import httpx
from supabase import AuthError, AuthRetryableError, Client

from src.portal.services.auth.exceptions import (
    CredentialsRejectedError,
    RegistrationError,
    TransientFailure,
)
from src.portal.services.auth.models import CredentialPair
from src.portal.services.database.utils import SupabaseQueryBuilder

logger = logging.getLogger(__name__)

CREATE_RETAILER_FUNCTION = "create_retailer_account"


def slugify(business_name: str) -> str:
    """
    Build a retailer slug from its business name.

    Example:
        >>> slugify("Joe's Coffee & Tea!")
        'joe-s-coffee-tea'
    """
    slug = re.sub(r"[^a-z0-9]+", "-", business_name.lower())
    return slug.strip("-")


def _friendly_signup_message(message: str) -> str:
    lowered = message.lower()
    if "rate limit" in lowered:
        return (
            "Too many signup attempts. Please wait a few minutes before trying again, "
            "or contact support if you need immediate assistance."
        )
    if "already registered" in lowered:
        return (
            "This email is already registered. "
            "Please sign in instead or use a different email address."
        )
    return message


class IdentityProvider:
    """
    Credential flows that obtain a credential pair from Supabase Auth.

    Sign-in and sign-up store a session on the client that performs them, so
    each call runs on a fresh client from ``client_factory`` and the shared
    startup clients stay session-free.

    Attributes:
        client_factory: Builds a throwaway anon-key Supabase client
        admin_db: Query builder over the service-role client
        email_redirect_url: Where confirmation emails send the user
    """

    def __init__(
        self,
        client_factory: Callable[[], Client],
        admin_db: SupabaseQueryBuilder,
        email_redirect_url: str,
    ) -> None:
        self.client_factory = client_factory
        self.admin_db = admin_db
        self.email_redirect_url = email_redirect_url

    def sign_in_with_password(self, email: str, password: str) -> CredentialPair:
        """
        Exchange email and password for a credential pair.

        Raises:
            CredentialsRejectedError: If Supabase rejects the credentials
            TransientFailure: If Supabase could not be reached
        """
        client = self.client_factory()
        try:
            response = client.auth.sign_in_with_password({"email": email, "password": password})
        except (AuthRetryableError, httpx.TransportError) as e:
            raise TransientFailure(str(e)) from e
        except AuthError as e:
            logger.warning(f"Sign-in rejected for {email}: {e.message}")
            raise CredentialsRejectedError(e.message) from e

        if response.session is None:
            raise CredentialsRejectedError("Failed to create session")

        return CredentialPair(
            access_token=response.session.access_token,
            refresh_token=response.session.refresh_token,
        )

    def sign_out(self, access_token: str) -> bool:
        """
        Revoke the session behind an access token at Supabase Auth.

        Best effort: logout must succeed even when the token has already
        expired or the provider is down, so failures are logged and reported
        through the return value instead of raised.

        Args:
            access_token: Access token from the session cookie

        Returns:
            True if the provider revoked the session, False otherwise
        """
        try:
            self.admin_db.client.auth.admin.sign_out(access_token)
        except Exception as e:
            logger.warning(
                f"Provider sign-out failed, clearing cookies only: {e}",
                extra={"error_type": "sign_out_failed"},
            )
            return False

        return True

    def register_retailer(
        self,
        email: str,
        password: str,
        business_name: str,
        website_url: str,
        commission: float,
    ) -> dict[str, Any]:
        """
        Create an auth user and its pending retailer account.

        The retailer row and the profile linking it are created by the
        privileged create_retailer_account database function.

        Returns:
            Dictionary with the new user's id and the function's result

        Raises:
            RegistrationError: If sign-up or account creation fails
            TransientFailure: If Supabase could not be reached
        """
        client = self.client_factory()
        try:
            response = client.auth.sign_up(
                {
                    "email": email,
                    "password": password,
                    "options": {"email_redirect_to": self.email_redirect_url},
                }
            )
        except (AuthRetryableError, httpx.TransportError) as e:
            raise TransientFailure(str(e)) from e
        except AuthError as e:
            logger.warning(f"Sign-up rejected for {email}: {e.message}")
            raise RegistrationError(_friendly_signup_message(e.message)) from e

        if response.user is None:
            raise RegistrationError("Failed to create account")

        user_id = str(response.user.id)
        try:
            account = self.admin_db.call_rpc(
                CREATE_RETAILER_FUNCTION,
                {
                    "p_user_id": user_id,
                    "p_email": email,
                    "p_business_name": business_name,
                    "p_slug": slugify(business_name),
                    "p_website_url": website_url,
                    "p_commission": commission,
                },
            )
        except httpx.HTTPError as e:
            raise TransientFailure(str(e)) from e
        except Exception as e:
            raise RegistrationError(f"Failed to create retailer account: {e}") from e

        logger.info(f"Registered retailer account for user {user_id}")
        return {"user_id": user_id, "account": account}
