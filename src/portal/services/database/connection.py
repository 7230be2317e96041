"""Supabase client construction."""

from supabase import Client, ClientOptions, create_client

from src.portal.config import Settings


def _server_options() -> ClientOptions:
    # Server-side clients never hold a user session of their own
    return ClientOptions(auto_refresh_token=False, persist_session=False)


def create_supabase_client(settings: Settings) -> Client:
    """
    Create a Supabase client with the anon key.

    Used for identity-provider calls (token introspection, sign-in, sign-up).
    Called once during application startup; the returned client is shared
    read-only by every request.

    Args:
        settings: Validated application settings

    Returns:
        Configured Supabase client with anon key

    Example:
        >>> client = create_supabase_client(settings)
        >>> response = client.auth.get_user(access_token)
    """
    return create_client(settings.supabase_url, settings.supabase_anon_key, _server_options())


def create_supabase_admin_client(settings: Settings) -> Client:
    """
    Create a Supabase admin client with the service role key.

    This client bypasses Row-Level Security (RLS) policies. It backs the
    profile and retailer lookups of the authorization gate, which performs its
    own authorization, and the privileged account creation function.

    ⚠️ WARNING: This client has full database access. Only use for trusted server-side operations.

    Args:
        settings: Validated application settings

    Returns:
        Configured Supabase client with service role key (bypasses RLS)
    """
    return create_client(
        settings.supabase_url, settings.supabase_service_role_key, _server_options()
    )
