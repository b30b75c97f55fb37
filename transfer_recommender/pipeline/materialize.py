"""
Row materializer: column vectors → row records → ``InventoryRow`` objects.

The upstream host delivers the snapshot column-oriented::

    columns     = ["c1", "c2"]                          # selected column ids
    data        = {"c1": ["P1", "P2"], "c2": [5, 0]}    # id -> column vector
    column_info = {"c1": ColumnInfo(name="product_key"),
                   "c2": ColumnInfo(name="quantity_on_hand")}

and the pipeline needs one record per row keyed by field name::

    [{"product_key": "P1", "quantity_on_hand": 5},
     {"product_key": "P2", "quantity_on_hand": 0}]

"Not loaded" is a normal transient state while the host streams data in:
it yields an empty list, never an exception.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from pydantic import BaseModel, ConfigDict

from transfer_recommender.models.inventory import InventoryRow

logger = logging.getLogger(__name__)


class ColumnInfo(BaseModel):
    """Column metadata supplied by the host alongside the data."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    column_type: Optional[str] = None


def _info_name(info: Any) -> Optional[str]:
    if isinstance(info, ColumnInfo):
        return info.name
    if isinstance(info, Mapping):
        name = info.get("name")
        return str(name) if name is not None else None
    return None


def is_source_loaded(
    columns:     Optional[Sequence[str]],
    data:        Optional[Mapping[str, Any]],
    column_info: Optional[Mapping[str, Any]],
) -> bool:
    """Return True when every selected column has metadata and a non-empty vector."""
    if not isinstance(columns, (list, tuple)) or not columns:
        return False
    if not all(isinstance(column_id, (str, int)) for column_id in columns):
        return False
    if not isinstance(data, Mapping) or not isinstance(column_info, Mapping):
        return False
    for column_id in columns:
        vector = data.get(column_id)
        if not isinstance(vector, (list, tuple)) or len(vector) == 0:
            return False
        if _info_name(column_info.get(column_id)) is None:
            return False
    return True


def materialize_records(
    columns:     Optional[Sequence[str]],
    data:        Optional[Mapping[str, Any]],
    column_info: Optional[Mapping[str, Any]],
) -> list[dict[str, Any]]:
    """Pivot column vectors into one record per row, keyed by field name.

    The row count is the length of the first selected column.  Cells missing
    from a shorter vector come back as ``None``.

    Returns:
        List of records, or ``[]`` when the source is not loaded yet.
    """
    if not is_source_loaded(columns, data, column_info):
        logger.debug("Source not loaded yet; nothing to materialize.")
        return []

    # Resolve id -> (field name, vector) once per call.
    resolved = [
        (_info_name(column_info[column_id]), data[column_id])
        for column_id in columns
    ]
    n_rows = len(resolved[0][1])

    return [
        {
            name: (vector[i] if i < len(vector) else None)
            for name, vector in resolved
        }
        for i in range(n_rows)
    ]


def materialize_rows(
    columns:     Optional[Sequence[str]],
    data:        Optional[Mapping[str, Any]],
    column_info: Optional[Mapping[str, Any]],
) -> list[InventoryRow]:
    """Materialize the snapshot into typed ``InventoryRow`` objects."""
    rows = [InventoryRow.from_record(r) for r in materialize_records(columns, data, column_info)]
    logger.debug("Materialized %d inventory rows", len(rows))
    return rows
