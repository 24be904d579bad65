import logging

from supabase import create_client, Client
from app.config.settings import settings

logger = logging.getLogger(__name__)


class SupabaseClient:
    """Process-wide client handle: created on first use, shared by every request."""

    _client: Client = None

    @classmethod
    def get_client(cls) -> Client:
        if cls._client is None:
            logger.info("Creating Supabase client for %s", settings.supabase_url)
            cls._client = create_client(settings.supabase_url, settings.supabase_key)
        return cls._client

    @classmethod
    def reset_client(cls):
        cls._client = None


def get_supabase() -> Client:
    return SupabaseClient.get_client()
