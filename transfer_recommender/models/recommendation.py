"""
Transfer recommendation output model.

A ``TransferRecommendation`` pairs a shortage store (stock-out risk
``Critical`` / ``High``) with an excess store (``Overstocked``) holding the
same product, and carries a snapshot of both sides plus the suggested
transfer quantity.

The model is frozen: the matcher creates it, the deduplicator may replace it
with a better alternative, and nothing mutates it after ranking.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator


class TransferRecommendation(BaseModel):
    """A single shortage ← excess transfer opportunity for one product.

    Attributes:
        product_key: Product identifier shared by both stores.
        product_name: Product display name.
        sku_number: Product SKU.
        shortage_store_name: Display name of the store running short.
        shortage_store_key: Identifier of the store running short.
        shortage_city: City of the store running short.
        shortage_qty: Units on hand at the shortage store.
        shortage_needed: Units missing to reach the reorder point (>= 0).
        shortage_days: Days of supply left at the shortage store.
        shortage_trend: Percent change of 30d vs 90d daily sales.
        shortage_risk: Stock-out risk label of the shortage row.
        excess_store_name: Display name of the overstocked store.
        excess_store_key: Identifier of the overstocked store.
        excess_city: City of the overstocked store.
        excess_qty: Units on hand at the excess store.
        excess_available: Surplus after reserving projected sales (>= 0).
        excess_days: Days of supply at the excess store.
        excess_trend: Percent change of 30d vs 90d daily sales.
        distance: Distance to the excess store in miles, when the snapshot
            carries one; empty otherwise.
        recommended_transfer_qty: ``min(shortage_needed, excess_available, cap)``.
    """

    model_config = ConfigDict(frozen=True)

    product_key: str = ""
    product_name: str = ""
    sku_number: str = ""

    shortage_store_name: str = ""
    shortage_store_key: str = ""
    shortage_city: str = ""
    shortage_qty: float = 0.0
    shortage_needed: float = 0.0
    shortage_days: float = 0.0
    shortage_trend: int = 0
    shortage_risk: str = ""

    excess_store_name: str = ""
    excess_store_key: str = ""
    excess_city: str = ""
    excess_qty: float = 0.0
    excess_available: float = 0.0
    excess_days: float = 0.0
    excess_trend: int = 0
    distance: str = ""

    recommended_transfer_qty: float = 0.0

    @model_validator(mode="after")
    def validate_quantities(self) -> "TransferRecommendation":
        if self.shortage_needed < 0:
            raise ValueError("shortage_needed must be non-negative.")
        if self.excess_available < 0:
            raise ValueError("excess_available must be non-negative.")
        if self.recommended_transfer_qty > min(self.shortage_needed, self.excess_available):
            raise ValueError(
                f"recommended_transfer_qty ({self.recommended_transfer_qty}) must not "
                f"exceed shortage_needed ({self.shortage_needed}) or "
                f"excess_available ({self.excess_available})."
            )
        return self

    def to_record(self) -> dict[str, Any]:
        """Flat dict of all fields, in declaration order."""
        return self.model_dump()
