"""
Columnar snapshot loading — reads an inventory snapshot from disk in the
column-oriented shape the recommendation pipeline consumes.

Supported files
---------------
``.json`` — a host-style export::

    {
      "columns":  {"c1": {"name": "product_key"}, "c2": {"name": "stockout_risk"}},
      "data":     {"c1": ["P1", "P1"], "c2": ["Critical", "Overstocked"]},
      "selected": ["c1", "c2"]            # optional; defaults to every column id
    }

``.parquet`` — one column per field; the column name doubles as the column
id and the field name.

The loader checks file shape only.  Whether the columns are populated is the
pipeline's concern (an empty or partial snapshot yields no recommendations).
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pyarrow.parquet as pq

from transfer_recommender.pipeline.materialize import ColumnInfo

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = frozenset({".json", ".parquet"})


@dataclass
class ColumnarSnapshot:
    """Column-oriented inventory table plus its metadata.

    Attributes:
        columns:     Selected column ids, in display order.
        data:        Column id -> column vector.
        column_info: Column id -> metadata (field name).
        source:      File the snapshot was read from.
    """

    columns:     list[str]
    data:        dict[str, list[Any]]
    column_info: dict[str, ColumnInfo]
    source:      str = ""
    row_count:   int = field(init=False)

    def __post_init__(self) -> None:
        first = self.data.get(self.columns[0]) if self.columns else None
        self.row_count = len(first) if isinstance(first, list) else 0


def load_snapshot(path: Path) -> ColumnarSnapshot:
    """Load a ``.json`` or ``.parquet`` inventory snapshot.

    Args:
        path: Snapshot file.

    Returns:
        ``ColumnarSnapshot`` ready for ``recommend_transfers()``.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If the suffix is unsupported or the JSON is malformed.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Snapshot file not found: {path}")

    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise ValueError(
            f"Unsupported snapshot format '{suffix}'; expected one of "
            f"{sorted(SUPPORTED_SUFFIXES)}."
        )

    snapshot = _load_parquet(path) if suffix == ".parquet" else _load_json(path)
    logger.info(
        "Snapshot loaded: %s | columns=%d rows=%d",
        path.name, len(snapshot.columns), snapshot.row_count,
    )
    return snapshot


def _load_parquet(path: Path) -> ColumnarSnapshot:
    table = pq.read_table(str(path))
    data: dict[str, list[Any]] = table.to_pydict()
    names = list(data.keys())
    return ColumnarSnapshot(
        columns=names,
        data=data,
        column_info={name: ColumnInfo(name=name, column_type=str(table.schema.field(name).type))
                     for name in names},
        source=str(path),
    )


def _load_json(path: Path) -> ColumnarSnapshot:
    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Snapshot {path.name} is not valid JSON: {exc}") from exc

    if not isinstance(raw, dict):
        raise ValueError(f"Snapshot {path.name} must be a JSON object.")

    columns_raw = raw.get("columns", {})
    data_raw = raw.get("data", {})
    if not isinstance(columns_raw, dict) or not isinstance(data_raw, dict):
        raise ValueError(
            f"Snapshot {path.name}: 'columns' and 'data' must be JSON objects."
        )

    column_info: dict[str, ColumnInfo] = {}
    for column_id, info in columns_raw.items():
        if isinstance(info, str):
            info = {"name": info}
        if not isinstance(info, dict) or "name" not in info:
            raise ValueError(f"Snapshot {path.name}: column '{column_id}' has no name.")
        column_info[str(column_id)] = ColumnInfo(**info)

    selected = raw.get("selected")
    if selected is None:
        selected = list(column_info.keys())
    elif not isinstance(selected, list):
        raise ValueError(f"Snapshot {path.name}: 'selected' must be a list of column ids.")

    return ColumnarSnapshot(
        columns=[str(c) for c in selected],
        data={str(k): v for k, v in data_raw.items()},
        column_info=column_info,
        source=str(path),
    )
