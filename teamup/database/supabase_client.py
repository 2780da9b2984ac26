from typing import Any, Callable, List, Optional
from supabase import create_client, Client, ClientOptions
from teamup.config import settings


def _client_options() -> ClientOptions:
    # Store calls run to completion or timeout regardless of client disconnects
    return ClientOptions(postgrest_client_timeout=settings.store_timeout_seconds)


class SupabaseClient:
    _client: Client = None
    _service_client: Client = None

    @classmethod
    def get_client(cls) -> Client:
        if cls._client is None:
            cls._client = create_client(
                settings.supabase_url, settings.supabase_key, options=_client_options()
            )
        return cls._client

    @classmethod
    def get_service_client(cls) -> Client:
        """Client with service_role key; bypasses RLS. Use in background workers."""
        if cls._service_client is None and settings.supabase_service_role_key:
            cls._service_client = create_client(
                settings.supabase_url,
                settings.supabase_service_role_key,
                options=_client_options(),
            )
        return cls._service_client or cls.get_client()

    @classmethod
    def reset_client(cls):
        cls._client = None
        cls._service_client = None


def get_supabase() -> Client:
    return SupabaseClient.get_client()


def fetch_all(build_query: Callable[[], Any], page_size: Optional[int] = None) -> List[dict]:
    """
    Read every row of a select by paging with .range() until a short page.

    PostgREST silently truncates unbounded selects at its max-rows setting.
    build_query must return a fresh, ordered query each call since range()
    mutates the builder.
    """
    size = page_size or settings.store_page_size
    rows: List[dict] = []
    start = 0
    while True:
        page = build_query().range(start, start + size - 1).execute().data or []
        rows.extend(page)
        if len(page) < size:
            return rows
        start += size
