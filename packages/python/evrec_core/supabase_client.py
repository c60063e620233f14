from __future__ import annotations

from typing import Any, Callable

from postgrest.exceptions import APIError as PostgrestAPIError
from supabase import Client, create_client

from .config import Settings, get_settings
from .errors import Conflict, Forbidden

PAGE_SIZE = 1000  # PostgREST default max rows per response
MAX_IN = 200  # keep `in` filters within PostgREST URL/param limits


def get_supabase_client(settings: Settings | None = None) -> Client:
    """Return a Supabase client for the corpus, catalog and interaction tables."""
    settings = settings or get_settings()

    missing = [
        name
        for name, value in {
            "SUPABASE_URL": settings.supabase_url,
            "SUPABASE_API_KEY": settings.supabase_api_key,
        }.items()
        if not (value and value.strip())
    ]
    if missing:
        raise EnvironmentError(
            f"Missing required env vars: {', '.join(sorted(missing))}"
        )

    return create_client(settings.supabase_url, settings.supabase_api_key)


def map_pgrest(e: PostgrestAPIError) -> Exception:
    code = getattr(e, "code", None) or ""
    # Postgres / PostgREST error codes:
    # 23505 unique_violation, 42501 insufficient_privilege (RLS), 23503 foreign_key_violation
    if code == "23505":
        return Conflict("duplicate")
    if code == "42501":
        return Forbidden("permission denied")
    if code == "23503":
        return Conflict("foreign key violation")
    return e  # let unexpected ones bubble up


def select_all(build_query: Callable[[], Any]) -> list[dict]:
    """Drain a select query page by page; `build_query` returns a fresh filtered query."""
    rows: list[dict] = []
    start = 0
    while True:
        try:
            res = build_query().range(start, start + PAGE_SIZE - 1).execute()
        except PostgrestAPIError as e:
            raise map_pgrest(e)
        page = res.data or []
        rows.extend(page)
        if len(page) < PAGE_SIZE:
            return rows
        start += PAGE_SIZE


def chunked(values: list, size: int = MAX_IN):
    for i in range(0, len(values), size):
        yield values[i : i + size]
