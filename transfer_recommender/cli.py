"""
Inventory Transfer Recommender — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Load the columnar snapshot.
  4. Run the recommendation pipeline with explicit config arguments.
  5. Report result to stdout.

Install and run::

    pip install -e .
    transfer-recs --help
    transfer-recs validate-config
    transfer-recs recommend data/snapshot.json --card-index 2
    transfer-recs recommend data/snapshot.parquet --all --csv-out data/outputs
    transfer-recs initiate-transfer data/snapshot.json --card-index 1
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="transfer-recs",
    help="Inventory transfer recommendations from a store × product stock snapshot.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from transfer_recommender.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from transfer_recommender.utils.logging import configure_logging
    configure_logging(config.logging)


def _load_snapshot_or_exit(snapshot_path: str):
    """Load a snapshot, printing a friendly error and exiting on failure."""
    from transfer_recommender.ingestion.snapshot import load_snapshot

    try:
        return load_snapshot(Path(snapshot_path))
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)


def _resolve_card_index(card_index: Optional[int], config) -> int:
    if card_index is None:
        return config.display.card_index
    if card_index < 1:
        typer.echo(f"[ERROR] --card-index must be >= 1, got {card_index}.", err=True)
        raise typer.Exit(code=1)
    return card_index


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Shortage risks:   {', '.join(config.matching.shortage_risks)}")
    typer.echo(f"  Excess risk:      {config.matching.excess_risk}")
    typer.echo(f"  Reserve days:     {config.matching.reserve_days}")
    typer.echo(f"  Min surplus:      {config.matching.min_excess_available:g}")
    typer.echo(f"  Transfer cap:     {config.matching.max_transfer_qty:g}")
    typer.echo(f"  Dedup key:        {config.ranking.dedup_key}")
    typer.echo(f"  Card index:       {config.display.card_index}")
    typer.echo(f"  Log level:        {config.logging.level}")
    typer.echo(f"  Debug mode:       {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))


@app.command("recommend")
def recommend(
    snapshot_path: str = typer.Argument(
        ...,
        help="Inventory snapshot (.json or .parquet).",
    ),
    card_index: Optional[int] = typer.Option(
        None,
        "--card-index",
        help="1-based position of the recommendation to show (default from config).",
    ),
    show_all: bool = typer.Option(
        False,
        "--all",
        help="Show every ranked recommendation instead of a single position.",
    ),
    json_out: Optional[str] = typer.Option(
        None,
        "--json-out",
        help="Directory to write the full ranked list as JSON.",
    ),
    csv_out: Optional[str] = typer.Option(
        None,
        "--csv-out",
        help="Directory to write the full ranked list as CSV.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Rank transfer recommendations for a snapshot and print one (or all)."""
    from transfer_recommender.pipeline.recommend import build_ranked_recommendations
    from transfer_recommender.recommendations.ranker import select_at_position
    from transfer_recommender.reporting.export import (
        write_recommendations_csv,
        write_recommendations_json,
    )
    from transfer_recommender.reporting.formatters import format_empty, format_recommendation

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    position = _resolve_card_index(card_index, config)
    snapshot = _load_snapshot_or_exit(snapshot_path)

    ranked = build_ranked_recommendations(
        snapshot.columns,
        snapshot.data,
        snapshot.column_info,
        matching=config.matching,
        ranking=config.ranking,
    )

    if json_out:
        path = write_recommendations_json(ranked, Path(json_out), source=snapshot.source)
        typer.echo(f"JSON written: {path}")
    if csv_out:
        path = write_recommendations_csv(ranked, Path(csv_out))
        typer.echo(f"CSV written:  {path}")

    if show_all:
        if not ranked:
            typer.echo(format_empty())
            return
        blocks = [
            format_recommendation(rec, card_number=rank, indent=config.display.indent)
            for rank, rec in enumerate(ranked, start=1)
        ]
        typer.echo("\n\n".join(blocks))
        return

    selected = select_at_position(ranked, position)
    if not selected:
        typer.echo(format_empty(position))
        return
    typer.echo(format_recommendation(selected[0], card_number=position, indent=config.display.indent))


@app.command("initiate-transfer")
def initiate_transfer(
    snapshot_path: str = typer.Argument(
        ...,
        help="Inventory snapshot (.json or .parquet).",
    ),
    card_index: Optional[int] = typer.Option(
        None,
        "--card-index",
        help="1-based position of the recommendation to request (default from config).",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Emit the transfer request values for one recommendation and trigger it.

    Each value is echoed as ``name=value``; exits with code 1 if dispatch fails.
    """
    from transfer_recommender.actions.dispatch import (
        TransferSinks,
        dispatch_transfer,
        generate_transfer_id,
    )
    from transfer_recommender.pipeline.recommend import recommend_transfers
    from transfer_recommender.reporting.formatters import format_empty

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    position = _resolve_card_index(card_index, config)
    snapshot = _load_snapshot_or_exit(snapshot_path)

    selected = recommend_transfers(
        snapshot.columns,
        snapshot.data,
        snapshot.column_info,
        card_index=position,
        matching=config.matching,
        ranking=config.ranking,
    )
    if not selected:
        typer.echo(format_empty(position))
        return

    def _echo_sink(name: str):
        def _sink(value) -> None:
            if isinstance(value, float) and value.is_integer():
                value = int(value)
            typer.echo(f"{name}={value}")
        return _sink

    sinks = TransferSinks(
        shortage_key=_echo_sink("p-shortageKey"),
        excess_key=_echo_sink("p-excessKey"),
        transfer_qty=_echo_sink("p-TransferRec"),
        transfer_id=_echo_sink("p-TransferId"),
        status=_echo_sink("p-Status"),
    )
    transfer_id = dispatch_transfer(
        selected[0],
        sinks,
        trigger=lambda: typer.echo("transferAction triggered"),
        status_label=config.action.status_label,
        id_factory=lambda: generate_transfer_id(config.action.transfer_id_prefix),
    )
    if transfer_id is None:
        typer.echo("[ERROR] Transfer request failed; see log for details.", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"[OK] Transfer {transfer_id} requested.")


if __name__ == "__main__":
    app()
