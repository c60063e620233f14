from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from evrec_catalog.schemas import Item
from evrec_core.types import ItemId
from evrec_vectors.item_vector import ItemVector

from evrec_user.interactions.schemas import InteractionRecord
from evrec_user.signals.weights import interaction_weight

log = logging.getLogger(__name__)


def build_user_profile(
    interactions: Sequence[InteractionRecord],
    *,
    get_item: Callable[[ItemId], Optional[Item]],
    vector_for: Callable[[Item], ItemVector],
) -> ItemVector:
    """
    Fold a user's interaction history into one content profile.

    Each interaction contributes the target item's vector scaled by its weight
    (see `signals.weights`). The sum is normalised per component. No history
    gives `ItemVector.identity()`.
    """
    acc = ItemVector.identity()
    for it in interactions:
        item = get_item(it.item_id)
        if item is None:
            log.debug("skipping interaction on missing item %s", it.item_id)
            continue
        acc = acc.add(vector_for(item).multiply(interaction_weight(it)))
    return acc.normalise()
