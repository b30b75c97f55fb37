"""Tests for transfer_recommender.reporting.formatters."""

from __future__ import annotations

import pytest

from transfer_recommender.reporting.formatters import (
    format_days,
    format_empty,
    format_recommendation,
    format_trend,
    format_units,
)


@pytest.mark.parametrize(
    "trend, expected",
    [(12, "+12% (up)"), (-8, "-8% (down)"), (0, "0%"), (150, "+150% (up)")],
)
def test_format_trend(trend, expected) -> None:
    assert format_trend(trend) == expected


@pytest.mark.parametrize(
    "value, expected",
    [(0, "0"), (15.0, "15"), (2.5, "3"), (1234.5, "1,235"), (1000000, "1,000,000")],
)
def test_format_units(value, expected) -> None:
    assert format_units(value) == expected


def test_format_days() -> None:
    assert format_days(2.0) == "2"
    assert format_days(2.4) == "2.4"
    assert format_days(0) == "0"


class TestFormatRecommendation:
    def test_title_with_card_number(self, sample_recommendation) -> None:
        text = format_recommendation(sample_recommendation, card_number=3)
        assert text.splitlines()[0] == "Transfer Recommendation #3"

    def test_title_without_card_number(self, sample_recommendation) -> None:
        assert format_recommendation(sample_recommendation).splitlines()[0] == "Transfer Recommendation"

    def test_contains_both_stores_and_quantity(self, sample_recommendation) -> None:
        text = format_recommendation(sample_recommendation)
        assert "Product: Cold Brew 12oz  (SKU 1001)" in text
        assert "SHORTAGE STORE: Downtown, Springfield  [Critical]" in text
        assert "Current: 5 units | Needed: 15 units" in text
        assert "Trend: +25% (up)" in text
        assert ">> Transfer 15 units >>" in text
        assert "EXCESS STORE: Uptown, Shelbyville" in text
        assert "Current: 200 units | Available: 170 units" in text
        assert "Days supply: 200 days | Trend: 0%" in text

    def test_indent_respected(self, sample_recommendation) -> None:
        lines = format_recommendation(sample_recommendation, indent=4).splitlines()
        assert lines[1].startswith("    Product:")
        assert lines[4].startswith("        Current:")

    def test_missing_city_and_sku(self, sample_recommendation) -> None:
        rec = sample_recommendation.model_copy(
            update={"shortage_city": "", "sku_number": "", "shortage_risk": ""}
        )
        text = format_recommendation(rec)
        assert "Product: Cold Brew 12oz\n" in text
        assert "SHORTAGE STORE: Downtown\n" in text

    def test_distance_shown_next_to_excess_city(self, sample_recommendation) -> None:
        rec = sample_recommendation.model_copy(update={"distance": "12"})
        assert "EXCESS STORE: Uptown, Shelbyville (12 miles away)" in format_recommendation(rec)

    def test_distance_omitted_when_blank(self, sample_recommendation) -> None:
        assert "miles away" not in format_recommendation(sample_recommendation)

    def test_no_trailing_newline(self, sample_recommendation) -> None:
        assert not format_recommendation(sample_recommendation).endswith("\n")


def test_format_empty() -> None:
    assert format_empty() == "No transfer recommendations."
    assert format_empty(4) == "No transfer recommendation at position 4."
