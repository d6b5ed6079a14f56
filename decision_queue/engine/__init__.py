"""
Decision engine for the decision queue.

Provides scoring, rollup aggregation, post-processing and dashboard
curation of decision items.
"""

from .scoring import (
    SEVERITY_WEIGHT,
    TIER_WEIGHT,
    age_bonus,
    compare_items,
    compute_sort_score,
    elapsed_days,
    score_breakdown,
    score_item,
    sort_items,
)
from .policies import ROLLUP_POLICIES, RollupPolicy
from .rollup import rollup_items
from .suppression import dedupe_items, remove_conflicts
from .postprocess import PostprocessMeta, PostprocessResult, postprocess
from .selector import DASHBOARD_LIMIT, select_top_for_dashboard
from .slices import (
    DecisionSlice,
    flatten_for_filter,
    select_for_asset,
    select_for_dashboard,
    select_for_portfolio,
)

__all__ = [
    # Scoring
    'SEVERITY_WEIGHT',
    'TIER_WEIGHT',
    'age_bonus',
    'compare_items',
    'compute_sort_score',
    'elapsed_days',
    'score_breakdown',
    'score_item',
    'sort_items',
    # Rollup
    'ROLLUP_POLICIES',
    'RollupPolicy',
    'rollup_items',
    # Suppression
    'dedupe_items',
    'remove_conflicts',
    # Postprocess
    'PostprocessMeta',
    'PostprocessResult',
    'postprocess',
    # Selection
    'DASHBOARD_LIMIT',
    'select_top_for_dashboard',
    'DecisionSlice',
    'flatten_for_filter',
    'select_for_asset',
    'select_for_dashboard',
    'select_for_portfolio',
]
