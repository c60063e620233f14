from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, model_validator

from evrec_core.types import InteractionType, ItemId, UserId


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InteractionRecord(BaseModel):
    """One immutable ledger entry: a user's action against an item."""

    model_config = ConfigDict(frozen=True)

    user_id: UserId
    item_id: ItemId
    interaction_type: InteractionType
    rating: float | None = None
    created_at: datetime = Field(default_factory=_utcnow)

    @model_validator(mode="after")
    def _rating_only_for_reviews(self) -> "InteractionRecord":
        if self.interaction_type == InteractionType.REVIEW and self.rating is None:
            raise ValueError("rating is required for REVIEW")
        if self.interaction_type != InteractionType.REVIEW and self.rating is not None:
            raise ValueError("rating is only allowed for REVIEW")
        return self
