from __future__ import annotations

from collections import defaultdict
from typing import Protocol

from postgrest.exceptions import APIError as PostgrestAPIError
from evrec_core.config import INTERACTIONS_TABLE
from evrec_core.errors import Conflict
from evrec_core.supabase_client import map_pgrest, select_all
from evrec_core.types import UserId

from .schemas import InteractionRecord


class InteractionLedger(Protocol):
    """Append-only interaction store; entries are never updated or deleted here."""

    def append(self, record: InteractionRecord) -> InteractionRecord: ...

    def for_user(self, user_id: UserId) -> list[InteractionRecord]: ...


class InMemoryInteractionLedger:
    def __init__(self) -> None:
        self._by_user: dict[UserId, list[InteractionRecord]] = defaultdict(list)

    def append(self, record: InteractionRecord) -> InteractionRecord:
        self._by_user[record.user_id].append(record)
        return record

    def for_user(self, user_id: UserId) -> list[InteractionRecord]:
        return list(self._by_user.get(user_id, []))


def _row_to_record(row: dict) -> InteractionRecord:
    return InteractionRecord(**row)


class SupabaseInteractionLedger:
    def __init__(self, client, *, table: str = INTERACTIONS_TABLE):
        self.client = client
        self.table = table

    def append(self, record: InteractionRecord) -> InteractionRecord:
        payload = record.model_dump(mode="json")
        try:
            res = (
                self.client.table(self.table)
                .insert(payload, returning="representation")
                .execute()
            )
        except PostgrestAPIError as e:
            raise map_pgrest(e)

        rows = res.data or []
        if not rows:
            # returning="representation" expects rows; if not, treat as conflict
            raise Conflict("interaction not created")
        return _row_to_record(rows[0])

    def for_user(self, user_id: UserId) -> list[InteractionRecord]:
        rows = select_all(
            lambda: self.client.table(self.table)
            .select("user_id, item_id, interaction_type, rating, created_at")
            .eq("user_id", user_id)
            .order("created_at")
        )
        return [_row_to_record(r) for r in rows]
