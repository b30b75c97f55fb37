"""
Shared pytest fixtures for the transfer recommender test suite.

Provides:
  - ``make_columnar``: turns a list of row dicts into the host's column-
    oriented shape ``(columns, data, column_info)``.
  - ``shortage_row`` / ``excess_row``: record factories with sensible
    defaults (one Critical shortage, one Overstocked donor for product P1).
  - ``sample_recommendation``: a valid ``TransferRecommendation``.
"""

from __future__ import annotations

from typing import Any, Callable

import pytest

from transfer_recommender.models.recommendation import TransferRecommendation
from transfer_recommender.pipeline.materialize import ColumnInfo

FIELDS: tuple[str, ...] = (
    "product_key", "product_name", "sku_number",
    "store_key", "store_name", "store_city",
    "quantity_on_hand", "reorder_point",
    "avg_daily_sales_30d", "avg_daily_sales_90d",
    "days_of_supply", "stockout_risk",
)


def to_columnar(
    records: list[dict[str, Any]],
    fields: tuple[str, ...] = FIELDS,
) -> tuple[list[str], dict[str, list[Any]], dict[str, ColumnInfo]]:
    """Pivot row dicts into ``(columns, data, column_info)`` with ids ``c0..cN``."""
    columns = [f"c{i}" for i in range(len(fields))]
    data = {cid: [r.get(name) for r in records] for cid, name in zip(columns, fields)}
    info = {cid: ColumnInfo(name=name) for cid, name in zip(columns, fields)}
    return columns, data, info


@pytest.fixture
def make_columnar() -> Callable[..., tuple]:
    return to_columnar


def _shortage(**overrides: Any) -> dict[str, Any]:
    row = {
        "product_key": "P1",
        "product_name": "Cold Brew 12oz",
        "sku_number": "1001",
        "store_key": "S-DT",
        "store_name": "Downtown",
        "store_city": "Springfield",
        "quantity_on_hand": 5,
        "reorder_point": 20,
        "avg_daily_sales_30d": 2.5,
        "avg_daily_sales_90d": 2.0,
        "days_of_supply": 2,
        "stockout_risk": "Critical",
    }
    row.update(overrides)
    return row


def _excess(**overrides: Any) -> dict[str, Any]:
    row = {
        "product_key": "P1",
        "product_name": "Cold Brew 12oz",
        "sku_number": "1001",
        "store_key": "S-UT",
        "store_name": "Uptown",
        "store_city": "Shelbyville",
        "quantity_on_hand": 200,
        "reorder_point": 20,
        "avg_daily_sales_30d": 1,
        "avg_daily_sales_90d": 1,
        "days_of_supply": 200,
        "stockout_risk": "Overstocked",
    }
    row.update(overrides)
    return row


@pytest.fixture
def shortage_row() -> Callable[..., dict[str, Any]]:
    """Factory: a Critical shortage record for product P1 (needs 15 units)."""
    return _shortage


@pytest.fixture
def excess_row() -> Callable[..., dict[str, Any]]:
    """Factory: an Overstocked record for product P1 (170 units spare)."""
    return _excess


@pytest.fixture
def sample_recommendation() -> TransferRecommendation:
    """A valid ``TransferRecommendation`` for testing."""
    return TransferRecommendation(
        product_key="P1",
        product_name="Cold Brew 12oz",
        sku_number="1001",
        shortage_store_name="Downtown",
        shortage_store_key="S-DT",
        shortage_city="Springfield",
        shortage_qty=5.0,
        shortage_needed=15.0,
        shortage_days=2.0,
        shortage_trend=25,
        shortage_risk="Critical",
        excess_store_name="Uptown",
        excess_store_key="S-UT",
        excess_city="Shelbyville",
        excess_qty=200.0,
        excess_available=170.0,
        excess_days=200.0,
        excess_trend=0,
        recommended_transfer_qty=15.0,
    )
