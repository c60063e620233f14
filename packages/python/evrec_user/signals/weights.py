from evrec_core.types import InteractionType

from evrec_user.interactions.schemas import InteractionRecord


# How strongly one interaction of each type pulls the profile towards the item.
# REVIEW is per rating point: a 4-star review contributes 0.5 * 4 = 2.0.
INTERACTION_WEIGHTS: dict[InteractionType, float] = {
    InteractionType.VIEW: 1.0,
    InteractionType.PURCHASE: 3.0,
    InteractionType.COMMENT: 1.5,
    InteractionType.REACT: 1.0,
    InteractionType.REVIEW: 0.5,
}


def interaction_weight(record: InteractionRecord) -> float:
    """Scalar applied to the target item's vector when folding it into a profile."""
    w = INTERACTION_WEIGHTS[record.interaction_type]
    if record.interaction_type == InteractionType.REVIEW:
        w *= float(record.rating or 0.0)
    return w
