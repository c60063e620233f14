from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Mapping, Sequence

from evrec_catalog.geo import inverse_distance
from evrec_catalog.item_repo import ItemRepository
from evrec_catalog.schemas import Item
from evrec_core.config import (
    BLEND_WEIGHT,
    CATEGORY_WEIGHT,
    DISTANCE_WEIGHT,
    HOST_WEIGHT,
    TAG_WEIGHT,
    TERM_WEIGHT,
)
from evrec_core.types import HostId, UserId
from evrec_corpus.corpus_store import CorpusStore
from evrec_corpus.idf import idf, label_idf_vector
from evrec_corpus.tfidf_builder import TfIdfBuilder
from evrec_corpus.tokenizer import Tokenizer, tokenize_for_tfidf
from evrec_user.interactions.interactions_repo import InteractionLedger
from evrec_user.profile import build_user_profile
from evrec_vectors.fixed_vector import SCORE_DIMENSIONS, FixedVector
from evrec_vectors.item_vector import ItemVector
from evrec_vectors.sparse_vector import SparseVector, empty

log = logging.getLogger(__name__)


# [term, tag, category, host, distance]
WEIGHT_VECTOR = FixedVector(
    [TERM_WEIGHT, TAG_WEIGHT, CATEGORY_WEIGHT, HOST_WEIGHT, DISTANCE_WEIGHT]
).normalised()

# score of a pair agreeing on every component; scores are divided by it so that
# such a pair lands on 1.0, the same value as the identity short-circuit
MAX_SCORE = FixedVector.ones(SCORE_DIMENSIONS).dot_product(WEIGHT_VECTOR)


def weighted_score(combined: FixedVector) -> float:
    return combined.dot_product(WEIGHT_VECTOR) / MAX_SCORE


@dataclass(frozen=True)
class CorpusSnapshot:
    """Corpus-wide figures shared by every score computed in one query."""

    num_documents: int
    tag_idf: SparseVector[str]
    category_idf: SparseVector[str]
    host_counts: Mapping[HostId, int]

    @classmethod
    def from_items(cls, items: Sequence[Item]) -> CorpusSnapshot:
        n = len(items)
        return cls(
            num_documents=n,
            tag_idf=label_idf_vector((i.tags for i in items), n),
            category_idf=label_idf_vector((i.categories for i in items), n),
            host_counts=Counter(i.host_id for i in items if i.host_id is not None),
        )


class RecommenderEngine:
    """
    Content-based scoring over the live catalog.

    - similarity: item vs item, with geographic proximity as the 5th component
    - user_score: item vs a user's profile, distance neutralised
    - blended_score: equal mix of the two

    Scores read the corpus tables as last rebuilt. Callers run
    `force_recalculate()` after catalog changes; a stale corpus is not detected.

    Ranking loops score many candidates against one reference. They pass the
    reference's `weighted_vector` / `weighted_profile` in via `ref_vector` /
    `profile_vector` so it is built once per query.
    """

    def __init__(
        self,
        items: ItemRepository,
        store: CorpusStore,
        ledger: InteractionLedger,
        *,
        tokenizer: Tokenizer = tokenize_for_tfidf,
    ):
        self.items = items
        self.ledger = ledger
        self.builder = TfIdfBuilder(items, store, tokenizer=tokenizer)

    def force_recalculate(self) -> None:
        self.builder.rebuild()

    def snapshot(self, items: Sequence[Item] | None = None) -> CorpusSnapshot:
        return CorpusSnapshot.from_items(
            items if items is not None else self.items.all_items()
        )

    # ---------- vectors ----------
    def item_vector(self, item: Item, snap: CorpusSnapshot) -> ItemVector:
        """Raw content vector: TF-IDF terms, unit-frequency tags/categories, host IDF."""
        if item.host_id is not None:
            host_weight = idf(snap.host_counts.get(item.host_id, 0), snap.num_documents)
            host = SparseVector([item.host_id], [host_weight])
        else:
            host = empty()
        return ItemVector(
            term=self.builder.term_vector(item, snap.num_documents),
            tag=SparseVector(item.tags, [1.0] * len(item.tags)),
            category=SparseVector(item.categories, [1.0] * len(item.categories)),
            host=host,
        )

    def weighted_profile(self, profile: ItemVector, snap: CorpusSnapshot) -> ItemVector:
        return profile.apply_idfs(snap.tag_idf, snap.category_idf).normalise()

    def weighted_vector(self, item: Item, snap: CorpusSnapshot) -> ItemVector:
        return self.weighted_profile(self.item_vector(item, snap), snap)

    def build_user_profile(
        self, user_id: UserId, snap: CorpusSnapshot | None = None
    ) -> ItemVector:
        snap = snap or self.snapshot()
        return build_user_profile(
            self.ledger.for_user(user_id),
            get_item=self.items.get,
            vector_for=lambda item: self.item_vector(item, snap),
        )

    # ---------- per-component comparisons ----------
    def similarity_vector(
        self,
        a: Item,
        b: Item,
        snap: CorpusSnapshot | None = None,
        *,
        ref_vector: ItemVector | None = None,
    ) -> FixedVector:
        """`ref_vector`, when given, is `weighted_vector(b, snap)`."""
        if a.id == b.id:
            return FixedVector.ones(SCORE_DIMENSIONS)
        snap = snap or self.snapshot()
        va = self.weighted_vector(a, snap)
        vb = ref_vector if ref_vector is not None else self.weighted_vector(b, snap)
        combined = va.combine(vb, inverse_distance(self.items.distance(a, b)))
        log.debug("similarity %s/%s: %s", a.id, b.id, combined.to_list())
        return combined

    def user_vector(
        self,
        item: Item,
        profile: ItemVector,
        snap: CorpusSnapshot | None = None,
        *,
        profile_vector: ItemVector | None = None,
    ) -> FixedVector:
        """`profile_vector`, when given, is `weighted_profile(profile, snap)`."""
        snap = snap or self.snapshot()
        vi = self.weighted_vector(item, snap)
        vp = (
            profile_vector
            if profile_vector is not None
            else self.weighted_profile(profile, snap)
        )
        # profiles carry no location
        combined = vi.combine(vp, 0.0)
        log.debug("user score %s: %s", item.id, combined.to_list())
        return combined

    # ---------- scores ----------
    def similarity(
        self,
        a: Item,
        b: Item,
        snap: CorpusSnapshot | None = None,
        *,
        ref_vector: ItemVector | None = None,
    ) -> float:
        if a.id == b.id:
            return 1.0
        return weighted_score(self.similarity_vector(a, b, snap, ref_vector=ref_vector))

    def user_score(
        self,
        item: Item,
        profile: ItemVector,
        snap: CorpusSnapshot | None = None,
        *,
        profile_vector: ItemVector | None = None,
    ) -> float:
        return weighted_score(
            self.user_vector(item, profile, snap, profile_vector=profile_vector)
        )

    def blended_score(
        self,
        test: Item,
        current: Item,
        profile: ItemVector,
        snap: CorpusSnapshot | None = None,
        *,
        ref_vector: ItemVector | None = None,
        profile_vector: ItemVector | None = None,
    ) -> float:
        snap = snap or self.snapshot()
        sim = self.similarity_vector(test, current, snap, ref_vector=ref_vector)
        user = self.user_vector(test, profile, snap, profile_vector=profile_vector)
        combined = sim.multiply(BLEND_WEIGHT).add(user.multiply(1.0 - BLEND_WEIGHT))
        return weighted_score(combined)
