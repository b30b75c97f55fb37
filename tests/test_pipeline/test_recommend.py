"""
Tests for transfer_recommender/pipeline/recommend.py.

What we test
------------
recommend_transfers():
  - Core transfer cases end to end from column vectors.
  - Not-loaded / malformed sources -> [] (never raises).
  - Idempotent on unchanged input.
  - Config sections are honoured (dedup key, cap).

RecommendationCache:
  - Same inputs -> hit, no recomputation.
  - Changing data or config -> miss.
  - Changing only the card index reuses the cached ranked list.
"""

from __future__ import annotations

import pytest

from transfer_recommender.config import MatchingConfig, RankingConfig
from transfer_recommender.pipeline.materialize import ColumnInfo
from transfer_recommender.pipeline import recommend as recommend_module
from transfer_recommender.pipeline.recommend import (
    RecommendationCache,
    build_ranked_recommendations,
    input_fingerprint,
    recommend_transfers,
)


class TestEndToEnd:
    def test_single_pair_quantities(self, make_columnar, shortage_row, excess_row):
        result = recommend_transfers(*make_columnar([shortage_row(), excess_row()]))
        assert len(result) == 1
        rec = result[0]
        assert rec.shortage_needed == 15
        assert rec.excess_available == 170
        assert rec.recommended_transfer_qty == 15

    def test_excess_without_sales_velocity_ignored(self, make_columnar, shortage_row, excess_row):
        source = make_columnar([shortage_row(), excess_row(avg_daily_sales_30d=0)])
        assert recommend_transfers(*source) == []

    def test_small_surplus_discarded(self, make_columnar, shortage_row, excess_row):
        # 38 - 1 * 30 = 8
        source = make_columnar([shortage_row(), excess_row(quantity_on_hand=38)])
        assert recommend_transfers(*source) == []

    def test_best_excess_store_wins(self, make_columnar, shortage_row, excess_row):
        source = make_columnar([
            shortage_row(),
            excess_row(store_key="E-small", quantity_on_hand=80),
            excess_row(store_key="E-big", quantity_on_hand=300),
            excess_row(store_key="E-mid", quantity_on_hand=150),
        ])
        ranked = build_ranked_recommendations(*source)
        assert len(ranked) == 1
        assert ranked[0].excess_store_key == "E-big"
        assert ranked[0].excess_available == 270

    def test_position_past_end(self, make_columnar, shortage_row, excess_row):
        source = make_columnar([
            shortage_row(store_name="North", store_key="N"),
            shortage_row(store_name="South", store_key="S"),
            excess_row(),
        ])
        assert len(build_ranked_recommendations(*source)) == 2
        assert recommend_transfers(*source, card_index=2) != []
        assert recommend_transfers(*source, card_index=3) == []

    def test_zero_baseline_trend(self, make_columnar, shortage_row, excess_row):
        source = make_columnar([
            shortage_row(avg_daily_sales_30d=4, avg_daily_sales_90d=0),
            excess_row(avg_daily_sales_30d=2, avg_daily_sales_90d=0),
        ])
        rec = recommend_transfers(*source)[0]
        assert rec.shortage_trend == 0
        assert rec.excess_trend == 0


class TestRanking:
    def test_critical_before_high(self, make_columnar, shortage_row, excess_row):
        source = make_columnar([
            shortage_row(store_name="High-1", store_key="H", stockout_risk="High", days_of_supply=0),
            shortage_row(store_name="Crit-1", store_key="C", days_of_supply=6),
            excess_row(),
        ])
        assert recommend_transfers(*source, card_index=1)[0].shortage_store_name == "Crit-1"
        assert recommend_transfers(*source, card_index=2)[0].shortage_store_name == "High-1"

    def test_dedup_key_from_config(self, make_columnar, shortage_row, excess_row):
        source = make_columnar([
            shortage_row(store_key="S-1"),
            shortage_row(store_key="S-2"),
            excess_row(),
        ])
        by_name = build_ranked_recommendations(*source)
        by_key = build_ranked_recommendations(*source, ranking=RankingConfig(dedup_key="key"))
        assert len(by_name) == 1
        assert len(by_key) == 2

    def test_cap_from_config(self, make_columnar, shortage_row, excess_row):
        source = make_columnar([shortage_row(quantity_on_hand=0, reorder_point=90), excess_row()])
        rec = recommend_transfers(*source, matching=MatchingConfig(max_transfer_qty=40))[0]
        assert rec.recommended_transfer_qty == 40


class TestDegradedInput:
    def test_not_loaded_returns_empty(self, make_columnar):
        columns, data, info = make_columnar([{"product_key": "P1"}])
        data[columns[3]] = []
        assert recommend_transfers(columns, data, info) == []

    def test_none_inputs(self):
        assert recommend_transfers(None, None, None) == []

    def test_malformed_cells_do_not_raise(self, make_columnar, shortage_row, excess_row):
        source = make_columnar([
            shortage_row(quantity_on_hand="??", reorder_point="20"),
            excess_row(quantity_on_hand=None),
            {"stockout_risk": None},
        ])
        result = recommend_transfers(*source)
        # excess row now has 0 on hand -> no surplus -> nothing to show
        assert result == []

    @pytest.mark.parametrize("columns", [5, "c0", [["c0"]], [{"id": "c0"}], ()])
    def test_malformed_column_list_returns_empty(self, columns):
        data = {"c0": ["P1"]}
        info = {"c0": ColumnInfo(name="product_key")}
        assert recommend_transfers(columns, data, info) == []

    def test_missing_product_keys_still_pair(self, make_columnar, shortage_row, excess_row):
        source = make_columnar([shortage_row(product_key=None), excess_row(product_key=None)])
        result = recommend_transfers(*source)
        assert len(result) == 1
        assert result[0].shortage_needed == 15

    def test_rows_with_other_labels_ignored(self, make_columnar, shortage_row, excess_row):
        source = make_columnar([shortage_row(stockout_risk="Medium"), excess_row()])
        assert recommend_transfers(*source) == []


class TestIdempotence:
    def test_same_input_same_output(self, make_columnar, shortage_row, excess_row):
        source = make_columnar([
            shortage_row(),
            shortage_row(store_name="South", store_key="S", stockout_risk="High"),
            excess_row(),
            excess_row(store_key="E2", quantity_on_hand=120),
        ])
        first = build_ranked_recommendations(*source)
        second = build_ranked_recommendations(*source)
        assert [r.model_dump() for r in first] == [r.model_dump() for r in second]


class TestRecommendationCache:
    def test_hit_on_unchanged_input(self, make_columnar, shortage_row, excess_row, monkeypatch):
        calls = []
        original = recommend_module.build_ranked_recommendations

        def _counting(*args, **kwargs):
            calls.append(1)
            return original(*args, **kwargs)

        monkeypatch.setattr(recommend_module, "build_ranked_recommendations", _counting)
        cache = RecommendationCache()
        source = make_columnar([shortage_row(), excess_row()])

        first = cache.select(*source)
        second = cache.select(*source)
        assert first == second
        assert len(calls) == 1
        assert (cache.hits, cache.misses) == (1, 1)

    def test_card_index_change_reuses_ranked_list(self, make_columnar, shortage_row, excess_row):
        cache = RecommendationCache()
        source = make_columnar([
            shortage_row(store_name="North", store_key="N"),
            shortage_row(store_name="South", store_key="S"),
            excess_row(),
        ])
        one = cache.select(*source, card_index=1)
        two = cache.select(*source, card_index=2)
        assert one != two
        assert cache.misses == 1
        assert cache.hits == 1

    def test_structurally_equal_copy_is_a_hit(self, make_columnar, shortage_row, excess_row):
        cache = RecommendationCache()
        cache.ranked(*make_columnar([shortage_row(), excess_row()]))
        cache.ranked(*make_columnar([shortage_row(), excess_row()]))
        assert cache.hits == 1

    def test_data_change_is_a_miss(self, make_columnar, shortage_row, excess_row):
        cache = RecommendationCache()
        cache.ranked(*make_columnar([shortage_row(), excess_row()]))
        changed = cache.ranked(*make_columnar([shortage_row(reorder_point=30), excess_row()]))
        assert cache.misses == 2
        assert changed[0].shortage_needed == 25

    def test_config_change_is_a_miss(self, make_columnar, shortage_row, excess_row):
        cache = RecommendationCache()
        source = make_columnar([shortage_row(), excess_row()])
        cache.ranked(*source)
        cache.ranked(*source, matching=MatchingConfig(max_transfer_qty=5))
        assert cache.misses == 2

    def test_clear_forces_recompute(self, make_columnar, shortage_row, excess_row):
        cache = RecommendationCache()
        source = make_columnar([shortage_row(), excess_row()])
        cache.ranked(*source)
        cache.clear()
        cache.ranked(*source)
        assert cache.misses == 2

    def test_returned_list_is_a_copy(self, make_columnar, shortage_row, excess_row):
        cache = RecommendationCache()
        source = make_columnar([shortage_row(), excess_row()])
        cache.ranked(*source).clear()
        assert len(cache.ranked(*source)) == 1


class TestInputFingerprint:
    def test_stable_and_sensitive(self, make_columnar, shortage_row):
        source = make_columnar([shortage_row()])
        assert input_fingerprint(*source) == input_fingerprint(*source)
        other = make_columnar([shortage_row(quantity_on_hand=6)])
        assert input_fingerprint(*source) != input_fingerprint(*other)
