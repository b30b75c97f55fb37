"""
Recommendation engine: turns classified inventory rows into ranked
shortage ← excess transfer recommendations.

Modules
-------
classifier : is_shortage() + is_excess() + partition_rows() — pure predicates.
matcher    : sales_trend() + match_transfers() — product-key hash join and
             per-pair quantities.
ranker     : deduplicate() + rank_recommendations() + select_at_position().
"""
