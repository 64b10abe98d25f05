import logging
from functools import lru_cache

from supabase import Client, create_client

from app.core.config import settings

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_supabase() -> Client:
    """Shared Supabase client (service key, RLS bypassed: ownership is checked in the routers)."""
    if not settings.SUPABASE_URL or not settings.SUPABASE_KEY:
        raise RuntimeError(
            "Variables d'environnement Supabase manquantes. "
            "Vérifiez SUPABASE_URL et SUPABASE_KEY dans .env"
        )

    client = create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
    logger.info("Supabase client initialised")
    return client
