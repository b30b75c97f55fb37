"""
Plain-text formatters for CLI output.

All formatters return multi-line strings suitable for ``typer.echo()``.
ASCII only; no third-party dependencies.

Example block::

    Transfer Recommendation #1
      Product: Cold Brew 12oz  (SKU 1001)

      SHORTAGE STORE: Downtown, Springfield  [Critical]
        Current: 5 units | Needed: 15 units
        Days supply: 2 days | Trend: +25% (up)

      >> Transfer 15 units >>

      EXCESS STORE: Uptown, Shelbyville
        Current: 200 units | Available: 170 units
        Days supply: 95 days | Trend: 0%
"""

from __future__ import annotations

import math

from transfer_recommender.models.recommendation import TransferRecommendation


def format_trend(trend: float) -> str:
    """``+12% (up)``, ``-8% (down)`` or ``0%``."""
    if trend > 0:
        return f"+{trend:g}% (up)"
    if trend < 0:
        return f"{trend:g}% (down)"
    return "0%"


def format_units(value: float) -> str:
    """Round half up and add thousands separators: ``1234.5`` → ``1,235``."""
    return f"{math.floor(value + 0.5):,}"


def format_days(value: float) -> str:
    """Whole days print without decimals, fractional days with one."""
    if float(value).is_integer():
        return f"{int(value)}"
    return f"{value:.1f}"


def _distance_suffix(distance: str) -> str:
    return f" ({distance} miles away)" if distance else ""


def _store_line(label: str, name: str, city: str) -> str:
    where = ", ".join(part for part in (name, city) if part) or "-"
    return f"{label}: {where}"


def format_recommendation(
    rec: TransferRecommendation,
    card_number: int | None = None,
    indent: int = 2,
) -> str:
    """Render one recommendation as a titled text block.

    Args:
        rec:         The recommendation to show.
        card_number: Position shown in the title (``#N``); omitted when None.
        indent:      Spaces per nesting level.

    Returns:
        Multi-line string without a trailing newline.
    """
    pad = " " * indent
    title = "Transfer Recommendation"
    if card_number:
        title = f"{title} #{card_number}"

    product = rec.product_name or "-"
    if rec.sku_number:
        product = f"{product}  (SKU {rec.sku_number})"

    risk = f"  [{rec.shortage_risk}]" if rec.shortage_risk else ""
    lines = [
        title,
        f"{pad}Product: {product}",
        "",
        f"{pad}{_store_line('SHORTAGE STORE', rec.shortage_store_name, rec.shortage_city)}{risk}",
        f"{pad}{pad}Current: {format_units(rec.shortage_qty)} units"
        f" | Needed: {format_units(rec.shortage_needed)} units",
        f"{pad}{pad}Days supply: {format_days(rec.shortage_days)} days"
        f" | Trend: {format_trend(rec.shortage_trend)}",
        "",
        f"{pad}>> Transfer {format_units(rec.recommended_transfer_qty)} units >>",
        "",
        f"{pad}{_store_line('EXCESS STORE', rec.excess_store_name, rec.excess_city)}"
        f"{_distance_suffix(rec.distance)}",
        f"{pad}{pad}Current: {format_units(rec.excess_qty)} units"
        f" | Available: {format_units(rec.excess_available)} units",
        f"{pad}{pad}Days supply: {format_days(rec.excess_days)} days"
        f" | Trend: {format_trend(rec.excess_trend)}",
    ]
    return "\n".join(lines)


def format_empty(card_index: int | None = None) -> str:
    if card_index is None:
        return "No transfer recommendations."
    return f"No transfer recommendation at position {card_index}."
