from supabase import create_client, Client, ClientOptions
from app.config.settings import settings


class SupabaseClient:
    """Process-wide Supabase client holder (anon key, RLS applies).

    Never sign in or out on this client: supabase-py rewrites its Authorization
    header on SIGNED_IN/SIGNED_OUT, which would change the identity of every
    store query in the process. Use create_auth_client() for that.
    """
    _client: Client = None

    @classmethod
    def get_client(cls) -> Client:
        if cls._client is None:
            cls._client = create_client(settings.supabase_url, settings.supabase_key)
        return cls._client

    @classmethod
    def reset_client(cls):
        cls._client = None


def get_supabase() -> Client:
    return SupabaseClient.get_client()


def create_auth_client() -> Client:
    """Short-lived client for one auth call (sign-up, sign-in, sign-out, email links).

    Holds no session past the request. Implicit flow so emailed links carry the
    tokens to site_url instead of needing a PKCE verifier kept on this client.
    """
    return create_client(
        settings.supabase_url,
        settings.supabase_key,
        options=ClientOptions(auto_refresh_token=False, persist_session=False, flow_type="implicit"),
    )
