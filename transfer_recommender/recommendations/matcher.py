"""
Transfer matcher: pairs shortage rows with excess rows of the same product.

For every (shortage, excess) pair sharing ``product_key``
----------------------------------------------------------
    shortage_needed  = max(0, reorder_point − quantity_on_hand)        [shortage]
    excess_available = max(0, quantity_on_hand − sales_30d × 30)       [excess]
    trend            = round((sales_30d − sales_90d) / sales_90d × 100) [each side]
    recommended_qty  = min(shortage_needed, excess_available, 100)

Pairs with ``excess_available <= 10`` are discarded: too little spare stock
to justify a transfer.  Trend is exactly 0 when ``sales_90d == 0``, which
also hides a genuine 0 → N jump in sales.

The output is in shortage-row order, then excess-row order, and may hold
several excess matches per shortage row; ``ranker.deduplicate`` collapses
those.
"""

from __future__ import annotations

import logging
import math
from collections import defaultdict

from transfer_recommender.models.inventory import InventoryRow
from transfer_recommender.models.recommendation import TransferRecommendation

logger = logging.getLogger(__name__)


def sales_trend(sales_30d: float, sales_90d: float) -> int:
    """Percent change of the 30-day vs 90-day average daily sales.

    Halves round up (``2.5 → 3``, ``-2.5 → -2``).  Returns 0 when there is
    no 90-day baseline.
    """
    if sales_90d == 0:
        return 0
    return math.floor((sales_30d - sales_90d) / sales_90d * 100 + 0.5)


def match_transfers(
    shortage:             list[InventoryRow],
    excess:               list[InventoryRow],
    reserve_days:         int = 30,
    min_excess_available: float = 10.0,
    max_transfer_qty:     float = 100.0,
) -> list[TransferRecommendation]:
    """Cross-join shortage and excess rows on ``product_key``.

    Args:
        shortage:             Rows classified as shortage candidates.
        excess:               Rows classified as excess candidates.
        reserve_days:         Days of 30d-rate sales kept back at the excess store.
        min_excess_available: Pairs at or below this surplus are dropped.
        max_transfer_qty:     Hard cap on the recommended quantity.

    Returns:
        Unordered (input-ordered) list of TransferRecommendation.
    """
    # Build lookup: product_key -> excess rows (input order kept)
    excess_by_product: dict[str, list[InventoryRow]] = defaultdict(list)
    for row in excess:
        excess_by_product[row.product_key].append(row)

    recommendations: list[TransferRecommendation] = []
    skipped = 0

    for short in shortage:
        candidates = excess_by_product.get(short.product_key)
        if not candidates:
            continue

        shortage_qty    = short.quantity_on_hand
        shortage_needed = max(0.0, short.reorder_point - shortage_qty)
        shortage_trend  = sales_trend(short.avg_daily_sales_30d, short.avg_daily_sales_90d)

        for ex in candidates:
            excess_qty       = ex.quantity_on_hand
            excess_available = max(0.0, excess_qty - ex.avg_daily_sales_30d * reserve_days)
            if excess_available <= min_excess_available:
                skipped += 1
                continue

            recommendations.append(
                TransferRecommendation(
                    product_key=short.product_key,
                    product_name=short.product_name,
                    sku_number=short.sku_number,
                    shortage_store_name=short.store_name,
                    shortage_store_key=short.store_key,
                    shortage_city=short.store_city,
                    shortage_qty=shortage_qty,
                    shortage_needed=shortage_needed,
                    shortage_days=short.days_of_supply,
                    shortage_trend=shortage_trend,
                    shortage_risk=short.stockout_risk,
                    excess_store_name=ex.store_name,
                    excess_store_key=ex.store_key,
                    excess_city=ex.store_city,
                    excess_qty=excess_qty,
                    excess_available=excess_available,
                    excess_days=ex.days_of_supply,
                    excess_trend=sales_trend(ex.avg_daily_sales_30d, ex.avg_daily_sales_90d),
                    distance=ex.distance,
                    recommended_transfer_qty=min(
                        shortage_needed, excess_available, max_transfer_qty
                    ),
                )
            )

    logger.debug(
        "Matched %d transfer pairs (%d dropped below surplus threshold %s)",
        len(recommendations), skipped, min_excess_available,
    )
    return recommendations
