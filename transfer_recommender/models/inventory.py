"""
Inventory snapshot row — one store × product line of the source table.

``InventoryRow`` is built fresh on every refresh from a materialized record
(see ``transfer_recommender.pipeline.materialize``) and discarded once the
recommendation list has been computed.

Data-quality policy
-------------------
Individual cell values never fail a row:
  - Text fields: missing / ``None`` → ``""``.  Numbers are rendered as text
    (``1001.0`` → ``"1001"``) so identifiers compare consistently.
  - Numeric fields: ints, floats, ``Decimal`` (Parquet ``decimal128``) and
    numeric strings convert to ``float``; missing, ``None``, empty,
    non-numeric, NaN or infinite → ``0.0``.

The model is frozen: rows are snapshots and are never edited in place.
"""

from __future__ import annotations

import math
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

# Stock-out risk labels produced by the upstream inventory model.
RISK_CRITICAL = "Critical"
RISK_HIGH = "High"
RISK_OVERSTOCKED = "Overstocked"

TEXT_FIELDS: tuple[str, ...] = (
    "product_key", "product_name", "sku_number",
    "store_key", "store_name", "store_city",
    "stockout_risk", "distance",
)
NUMERIC_FIELDS: tuple[str, ...] = (
    "quantity_on_hand", "reorder_point",
    "avg_daily_sales_30d", "avg_daily_sales_90d",
    "days_of_supply",
)


def to_number(value: Any) -> float:
    """Coerce a cell value to ``float``; anything unusable becomes ``0.0``."""
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float, Decimal)):
        try:
            number = float(value)
        except (ValueError, OverflowError):
            return 0.0
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        try:
            number = float(text)
        except ValueError:
            return 0.0
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


def to_text(value: Any) -> str:
    """Coerce a cell value to ``str``; ``None`` becomes ``""``."""
    if value is None:
        return ""
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
    if isinstance(value, Decimal):
        if not value.is_finite():
            return ""
        if value == value.to_integral_value():
            return str(int(value))
    return str(value)


class InventoryRow(BaseModel):
    """Per-store, per-product inventory metrics.

    Attributes:
        product_key: Product identifier used to pair shortage and excess rows.
        product_name: Product display name.
        sku_number: SKU as shown to store staff.
        store_key: Store identifier emitted when a transfer is initiated.
        store_name: Store display name.
        store_city: City the store is located in.
        quantity_on_hand: Units currently in stock.
        reorder_point: Stock level at which the store should reorder.
        avg_daily_sales_30d: Average units sold per day, trailing 30 days.
        avg_daily_sales_90d: Average units sold per day, trailing 90 days.
        days_of_supply: Days the current stock lasts at the current rate.
        stockout_risk: Risk label, e.g. ``"Critical"``, ``"High"``,
            ``"Overstocked"``.
        distance: Optional distance to the store, in miles, as supplied by
            the host.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    product_key: str = ""
    product_name: str = ""
    sku_number: str = ""
    store_key: str = ""
    store_name: str = ""
    store_city: str = ""
    quantity_on_hand: float = 0.0
    reorder_point: float = 0.0
    avg_daily_sales_30d: float = 0.0
    avg_daily_sales_90d: float = 0.0
    days_of_supply: float = 0.0
    stockout_risk: str = ""
    distance: str = ""

    @field_validator(*TEXT_FIELDS, mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        return to_text(v)

    @field_validator(*NUMERIC_FIELDS, mode="before")
    @classmethod
    def coerce_number(cls, v: Any) -> float:
        return to_number(v)

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "InventoryRow":
        """Build a row from a materialized record; unknown keys are ignored."""
        return cls(**{k: v for k, v in record.items() if k in cls.model_fields})
