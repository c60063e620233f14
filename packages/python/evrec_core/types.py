from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

ItemId = str
UserId = str
HostId = str


class InteractionType(str, Enum):
    VIEW = "view"
    PURCHASE = "purchase"
    COMMENT = "comment"
    REACT = "react"
    REVIEW = "review"  # carries a numeric rating


class ScoredItem(BaseModel):
    item_id: ItemId
    score: float


class RecommendationPage(BaseModel):
    items: list[ScoredItem] = Field(default_factory=list)
    total: int = 0  # number of scored candidates before pagination
