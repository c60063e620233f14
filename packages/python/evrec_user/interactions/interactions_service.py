from __future__ import annotations

import logging

from evrec_core.types import InteractionType, ItemId, UserId

from .interactions_repo import InteractionLedger
from .schemas import InteractionRecord

log = logging.getLogger(__name__)


class InteractionsService:
    def __init__(self, ledger: InteractionLedger):
        self.ledger = ledger

    def record_interaction(
        self, user_id: UserId, item_id: ItemId, interaction_type: InteractionType
    ) -> InteractionRecord:
        # Ratings go through record_rating
        assert interaction_type != InteractionType.REVIEW, "use record_rating for reviews"
        record = InteractionRecord(
            user_id=user_id, item_id=item_id, interaction_type=interaction_type
        )
        log.debug("interaction %s: user=%s item=%s", interaction_type.value, user_id, item_id)
        return self.ledger.append(record)

    def record_rating(self, user_id: UserId, item_id: ItemId, rating: float) -> InteractionRecord:
        record = InteractionRecord(
            user_id=user_id,
            item_id=item_id,
            interaction_type=InteractionType.REVIEW,
            rating=rating,
        )
        log.debug("rating %.2f: user=%s item=%s", rating, user_id, item_id)
        return self.ledger.append(record)
