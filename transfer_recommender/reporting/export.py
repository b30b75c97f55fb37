"""
Export helpers for ranked transfer recommendations.

All functions write to disk and return the written ``Path``.  CSV exports
are flat (one row per recommendation, 1-based ``rank`` first) so they load
directly in Excel or pandas.

Output files::

    <output_dir>/transfer_recommendations_<YYYY-MM-DD>.csv
    <output_dir>/transfer_recommendations_<YYYY-MM-DD>.json
"""

from __future__ import annotations

import csv
import json
import logging
from datetime import date
from pathlib import Path

from transfer_recommender.models.recommendation import TransferRecommendation
from transfer_recommender.utils.time_utils import utcnow

logger = logging.getLogger(__name__)

SCHEMA_VERSION = "v1"


def flatten_for_export(ranked: list[TransferRecommendation]) -> list[dict]:
    """One flat dict per recommendation with its 1-based ``rank``."""
    return [
        {"rank": rank, **rec.to_record()}
        for rank, rec in enumerate(ranked, start=1)
    ]


def write_recommendations_csv(
    ranked: list[TransferRecommendation],
    output_dir: Path,
    run_date: date | None = None,
) -> Path:
    """Write the ranked list to ``transfer_recommendations_<date>.csv``.

    An empty list produces an empty file.
    """
    if run_date is None:
        run_date = date.today()

    output_dir.mkdir(parents=True, exist_ok=True)
    csv_path = output_dir / f"transfer_recommendations_{run_date}.csv"

    rows = flatten_for_export(ranked)
    if not rows:
        csv_path.write_text("", encoding="utf-8")
    else:
        with csv_path.open("w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=list(rows[0].keys()))
            writer.writeheader()
            writer.writerows(rows)

    logger.info("Recommendation CSV written: %s (%d rows)", csv_path, len(rows))
    return csv_path


def write_recommendations_json(
    ranked: list[TransferRecommendation],
    output_dir: Path,
    run_date: date | None = None,
    source: str = "",
) -> Path:
    """Write the ranked list to ``transfer_recommendations_<date>.json``.

    Args:
        ranked:     Output of ``build_ranked_recommendations()``.
        output_dir: Target directory (created if missing).
        run_date:   Date label for the filename. Defaults to today.
        source:     Snapshot the recommendations were derived from.

    Returns:
        Path to the written JSON file.
    """
    if run_date is None:
        run_date = date.today()

    output_dir.mkdir(parents=True, exist_ok=True)
    json_path = output_dir / f"transfer_recommendations_{run_date}.json"

    payload = {
        "schema_version":  SCHEMA_VERSION,
        "generated_at":    utcnow().strftime("%Y-%m-%dT%H:%M:%SZ"),
        "source":          source,
        "count":           len(ranked),
        "recommendations": flatten_for_export(ranked),
    }
    json_path.write_text(json.dumps(payload, indent=2, default=str), encoding="utf-8")
    logger.info("Recommendation JSON written: %s", json_path)
    return json_path
