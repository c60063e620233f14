from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Optional, Protocol

from postgrest.exceptions import APIError as PostgrestAPIError
from evrec_core.config import ITEMS_TABLE
from evrec_core.supabase_client import map_pgrest, select_all
from evrec_core.types import ItemId

from .geo import distance_km
from .schemas import GeoPoint, Item


class ItemRepository(Protocol):
    """Read side of the item catalog consumed by the scoring core."""

    def all_items(self) -> list[Item]: ...

    def get(self, item_id: ItemId) -> Optional[Item]: ...

    def distance(self, a: Item, b: Item) -> float: ...


class InMemoryItemRepo:
    def __init__(self, items: Iterable[Item] = ()):
        self._items: dict[ItemId, Item] = {}
        for item in items:
            self.put(item)

    # ---------- catalog mutations (callers must rebuild the corpus afterwards) ----------
    def put(self, item: Item) -> Item:
        self._items[item.id] = item
        return item

    def remove(self, item_id: ItemId) -> bool:
        return self._items.pop(item_id, None) is not None

    # ---------- ItemRepository ----------
    def all_items(self) -> list[Item]:
        return list(self._items.values())

    def get(self, item_id: ItemId) -> Optional[Item]:
        return self._items.get(item_id)

    def distance(self, a: Item, b: Item) -> float:
        return distance_km(a.location, b.location)


def _ensure_ts(value) -> datetime | None:
    """Normalize timestamps coming from Postgres/Supabase into tz-aware datetimes."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, str):
        raw = value.strip()
        if not raw:
            return None
        # Supabase returns ISO strings that may end with `Z`; make them explicit UTC.
        normalized = raw.replace("Z", "+00:00") if raw.endswith("Z") else raw
        try:
            parsed = datetime.fromisoformat(normalized)
        except ValueError:
            return None
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    return None


def _row_to_item(row: dict) -> Item:
    lat, lng = row.get("latitude"), row.get("longitude")
    return Item(
        id=str(row["id"]),
        name=row.get("name") or "",
        description=row.get("description") or "",
        tags=row.get("tags") or [],
        categories=row.get("categories") or [],
        host_id=str(row["host_id"]) if row.get("host_id") is not None else None,
        location=GeoPoint(latitude=lat, longitude=lng)
        if lat is not None or lng is not None
        else None,
        published=bool(row.get("published", True)),
        ends_at=_ensure_ts(row.get("ends_at")),
    )


class SupabaseItemRepo:
    COLUMNS = "id, name, description, tags, categories, host_id, latitude, longitude, published, ends_at"

    def __init__(self, client, *, table: str = ITEMS_TABLE):
        self.client = client
        self.table = table

    def all_items(self) -> list[Item]:
        rows = select_all(
            lambda: self.client.table(self.table).select(self.COLUMNS).order("id")
        )
        return [_row_to_item(r) for r in rows]

    def get(self, item_id: ItemId) -> Optional[Item]:
        try:
            res = (
                self.client.table(self.table)
                .select(self.COLUMNS)
                .eq("id", item_id)
                .limit(1)
                .execute()
            )
        except PostgrestAPIError as e:
            raise map_pgrest(e)
        rows = res.data or []
        return _row_to_item(rows[0]) if rows else None

    def distance(self, a: Item, b: Item) -> float:
        return distance_km(a.location, b.location)
