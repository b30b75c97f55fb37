"""
Row classifier: splits inventory rows into shortage and excess candidates.

shortage : stockout_risk in {"Critical", "High"}
excess   : stockout_risk == "Overstocked" AND avg_daily_sales_30d > 0

Overstocked rows with no recent sales velocity are never transfer sources.
Rows with any other label fall in neither partition and are dropped.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from transfer_recommender.models.inventory import (
    RISK_CRITICAL,
    RISK_HIGH,
    RISK_OVERSTOCKED,
    InventoryRow,
)

DEFAULT_SHORTAGE_RISKS: tuple[str, ...] = (RISK_CRITICAL, RISK_HIGH)


def is_shortage(
    row: InventoryRow,
    shortage_risks: Sequence[str] = DEFAULT_SHORTAGE_RISKS,
) -> bool:
    return row.stockout_risk in shortage_risks


def is_excess(row: InventoryRow, excess_risk: str = RISK_OVERSTOCKED) -> bool:
    return row.stockout_risk == excess_risk and row.avg_daily_sales_30d > 0


def partition_rows(
    rows: Iterable[InventoryRow],
    shortage_risks: Sequence[str] = DEFAULT_SHORTAGE_RISKS,
    excess_risk: str = RISK_OVERSTOCKED,
) -> tuple[list[InventoryRow], list[InventoryRow]]:
    """Return ``(shortage, excess)`` lists, each in input order."""
    shortage: list[InventoryRow] = []
    excess: list[InventoryRow] = []
    for row in rows:
        if is_shortage(row, shortage_risks):
            shortage.append(row)
        elif is_excess(row, excess_risk):
            excess.append(row)
    return shortage, excess
