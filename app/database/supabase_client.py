from supabase import create_client, Client
from app.config import settings
import logging

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"


class SupabaseClient:
    _client: Client = None
    _service_client: Client = None

    @classmethod
    def get_client(cls) -> Client:
        if cls._client is None:
            logger.info(f"Creating Supabase client for {settings.supabase_url}")
            cls._client = create_client(settings.supabase_url, settings.supabase_key)
        return cls._client

    @classmethod
    def get_service_client(cls) -> Client:
        """Client with service_role key; bypasses RLS. Falls back to the anon client."""
        if cls._service_client is None and settings.supabase_service_role_key:
            cls._service_client = create_client(
                settings.supabase_url, settings.supabase_service_role_key
            )
        return cls._service_client or cls.get_client()

    @classmethod
    def reset_client(cls):
        cls._client = None
        cls._service_client = None


def get_supabase() -> Client:
    return SupabaseClient.get_client()


def error_code(exc: Exception) -> str | None:
    """Postgres SQLSTATE carried by a PostgREST APIError, if any."""
    code = getattr(exc, "code", None)
    return str(code) if code is not None else None


def is_unique_violation(exc: Exception) -> bool:
    return error_code(exc) == UNIQUE_VIOLATION
