from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Iterable

from evrec_catalog.schemas import Item
from evrec_core.config import get_settings
from evrec_core.errors import BadRequest, NotFound
from evrec_core.types import ItemId, RecommendationPage, ScoredItem, UserId
from evrec_vectors.item_vector import ItemVector

from .scoring import CorpusSnapshot, RecommenderEngine

log = logging.getLogger(__name__)


def _is_candidate(item: Item, now: datetime) -> bool:
    return item.published and not item.is_past(now)


class RecommendationService:
    """Id-based entry points and paginated ranking queries over the engine."""

    def __init__(self, engine: RecommenderEngine, *, max_results_cap: int | None = None):
        self.engine = engine
        self.max_results_cap = (
            max_results_cap if max_results_cap is not None else get_settings().max_results_cap
        )

    # ---------- helpers ----------
    def _get_item(self, item_id: ItemId) -> Item:
        item = self.engine.items.get(item_id)
        if item is None:
            raise NotFound(f"item {item_id} not found")
        return item

    def _check_paging(self, page_start: int, max_results: int) -> None:
        if page_start < 0:
            raise BadRequest("page_start must be >= 0", code="invalid_page_start")
        if max_results <= 0 or max_results > self.max_results_cap:
            raise BadRequest(
                f"max_results must be in 1..{self.max_results_cap}",
                code="invalid_max_results",
            )

    def _rank(
        self,
        candidates: Iterable[Item],
        score: Callable[[Item], float],
        page_start: int,
        max_results: int,
    ) -> RecommendationPage:
        scored = [ScoredItem(item_id=c.id, score=score(c)) for c in candidates]
        scored.sort(key=lambda s: (-s.score, s.item_id))
        page = scored[page_start : page_start + max_results]
        log.info(
            "ranked %d candidates, returning %d from %d", len(scored), len(page), page_start
        )
        return RecommendationPage(items=page, total=len(scored))

    # ---------- scoring by id ----------
    def force_recalculate(self) -> None:
        self.engine.force_recalculate()

    def similarity(self, id_a: ItemId, id_b: ItemId) -> float:
        return self.engine.similarity(self._get_item(id_a), self._get_item(id_b))

    def build_user_profile(self, user_id: UserId) -> ItemVector:
        return self.engine.build_user_profile(user_id)

    def user_score(self, item_id: ItemId, profile: ItemVector) -> float:
        return self.engine.user_score(self._get_item(item_id), profile)

    def blended_score(
        self, item_id: ItemId, ref_item_id: ItemId, profile: ItemVector
    ) -> float:
        return self.engine.blended_score(
            self._get_item(item_id), self._get_item(ref_item_id), profile
        )

    # ---------- ranking queries ----------
    def recommend_for_item(
        self,
        item_id: ItemId,
        page_start: int = 0,
        max_results: int = 20,
        *,
        now: datetime | None = None,
    ) -> RecommendationPage:
        self._check_paging(page_start, max_results)
        now = now or datetime.now(timezone.utc)
        current = self._get_item(item_id)

        items = self.engine.items.all_items()
        snap = CorpusSnapshot.from_items(items)
        ref = self.engine.weighted_vector(current, snap)
        candidates = [i for i in items if i.id != current.id and _is_candidate(i, now)]
        return self._rank(
            candidates,
            lambda c: self.engine.similarity(c, current, snap, ref_vector=ref),
            page_start,
            max_results,
        )

    def recommend_for_user(
        self,
        user_id: UserId,
        page_start: int = 0,
        max_results: int = 20,
        *,
        now: datetime | None = None,
    ) -> RecommendationPage:
        self._check_paging(page_start, max_results)
        now = now or datetime.now(timezone.utc)

        items = self.engine.items.all_items()
        snap = CorpusSnapshot.from_items(items)
        profile = self.engine.build_user_profile(user_id, snap)
        weighted = self.engine.weighted_profile(profile, snap)
        candidates = [i for i in items if i.host_id != user_id and _is_candidate(i, now)]
        return self._rank(
            candidates,
            lambda c: self.engine.user_score(c, profile, snap, profile_vector=weighted),
            page_start,
            max_results,
        )

    def recommend_for_item_and_user(
        self,
        item_id: ItemId,
        user_id: UserId,
        page_start: int = 0,
        max_results: int = 20,
        *,
        now: datetime | None = None,
    ) -> RecommendationPage:
        self._check_paging(page_start, max_results)
        now = now or datetime.now(timezone.utc)
        current = self._get_item(item_id)

        items = self.engine.items.all_items()
        snap = CorpusSnapshot.from_items(items)
        profile = self.engine.build_user_profile(user_id, snap)
        ref = self.engine.weighted_vector(current, snap)
        weighted = self.engine.weighted_profile(profile, snap)
        candidates = [
            i
            for i in items
            if i.id != current.id and i.host_id != user_id and _is_candidate(i, now)
        ]
        return self._rank(
            candidates,
            lambda c: self.engine.blended_score(
                c, current, profile, snap, ref_vector=ref, profile_vector=weighted
            ),
            page_start,
            max_results,
        )
