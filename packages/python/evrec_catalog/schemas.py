from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from evrec_core.types import HostId, ItemId


class GeoPoint(BaseModel):
    latitude: float | None = None
    longitude: float | None = None

    @property
    def known(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class Item(BaseModel):
    """One catalog item (event) as seen by the scoring core."""

    id: ItemId
    name: str = ""
    description: str = ""
    tags: list[str] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)
    host_id: HostId | None = None
    location: GeoPoint | None = None
    published: bool = True
    ends_at: datetime | None = None

    @field_validator("tags", "categories")
    @classmethod
    def _fold_labels(cls, v: list[str]) -> list[str]:
        # case-folded and de-duplicated, order kept
        seen: dict[str, None] = {}
        for label in v:
            key = label.strip().lower()
            if key:
                seen.setdefault(key, None)
        return list(seen)

    def searchable_text(self) -> list[str]:
        return [self.name, self.description]

    def is_past(self, now: datetime) -> bool:
        return self.ends_at is not None and self.ends_at < now
