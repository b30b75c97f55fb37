"""
Recommendation ranker: de-duplicates matched transfers, orders them by
urgency, and selects one by position.

Usage flow
----------
1. deduplicate(recommendations, dedup_key="name")
   -> list[TransferRecommendation]  (one per shortage store + product)

2. rank_recommendations(deduped, priority_risk="Critical")
   -> list[TransferRecommendation]  (most urgent first)

3. select_at_position(ranked, position=1)
   -> list[TransferRecommendation]  (zero or one element)

Sort order (ascending by the first differing key)
-------------------------------------------------
    1. risk tier          : "Critical" = 0, anything else = 1
    2. shortage_days      : ascending (fewer days of supply = more urgent)
    3. recommended qty    : descending (bigger transfer first)
"""

from __future__ import annotations

from typing import Literal

from transfer_recommender.models.inventory import RISK_CRITICAL
from transfer_recommender.models.recommendation import TransferRecommendation

DedupKey = Literal["name", "key"]


def _group_key(rec: TransferRecommendation, dedup_key: DedupKey) -> tuple[str, str]:
    if dedup_key == "key":
        return (rec.product_key, rec.shortage_store_key)
    return (rec.product_name, rec.shortage_store_name)


def deduplicate(
    recommendations: list[TransferRecommendation],
    dedup_key: DedupKey = "name",
) -> list[TransferRecommendation]:
    """Keep the best excess match per (product, shortage store).

    Each group keeps the recommendation with the strictly greatest
    ``excess_available``; on a tie the first one encountered wins.
    Groups come back in order of first appearance.

    Args:
        recommendations: Matcher output.
        dedup_key:       ``"name"`` groups on ``(product_name,
                         shortage_store_name)``, so same-named stores with
                         different keys collapse together.  ``"key"`` groups
                         on ``(product_key, shortage_store_key)``.

    Returns:
        At most one recommendation per group.
    """
    best: dict[tuple[str, str], TransferRecommendation] = {}
    for rec in recommendations:
        key = _group_key(rec, dedup_key)
        existing = best.get(key)
        if existing is None or rec.excess_available > existing.excess_available:
            best[key] = rec
    return list(best.values())


def rank_recommendations(
    recommendations: list[TransferRecommendation],
    priority_risk: str = RISK_CRITICAL,
) -> list[TransferRecommendation]:
    """Sort recommendations most-urgent first (stable)."""
    return sorted(
        recommendations,
        key=lambda r: (
            0 if r.shortage_risk == priority_risk else 1,
            r.shortage_days,
            -r.recommended_transfer_qty,
        ),
    )


def select_at_position(
    ranked: list[TransferRecommendation],
    position: int,
) -> list[TransferRecommendation]:
    """Return ``[ranked[position - 1]]``, or ``[]`` when out of range.

    ``position`` is 1-based; positions past the end (or below 1) are not an
    error, they just select nothing.
    """
    if 1 <= position <= len(ranked):
        return [ranked[position - 1]]
    return []
