from supabase import create_client, Client, ClientOptions
from dotenv import load_dotenv
import os

from config.notification_settings import int_env

load_dotenv()

# Seconds before a database request is abandoned
DB_TIMEOUT_SECONDS = int_env("NOTIFICATION_DB_TIMEOUT_SECONDS", 30)


def get_supabase_client(timeout: int = DB_TIMEOUT_SECONDS) -> Client:
    """
    Get initialized Supabase client for the explorer database.

    The client is shared by the collection phase and all dispatch threads.

    Args:
        timeout: Request timeout in seconds for table and RPC queries

    Raises:
        ValueError: If SUPABASE_URL or SUPABASE_SERVICE_KEY is not set
    """
    url: str | None = os.getenv("SUPABASE_URL")
    key: str | None = os.getenv("SUPABASE_SERVICE_KEY")

    if not url or not key:
        raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_KEY must be set")

    return create_client(url, key, options=ClientOptions(postgrest_client_timeout=timeout))
