"""
View slices over one pipeline run.

One postprocess run feeds several views (dashboard, asset page,
portfolio page). Entity views unwrap rollups so that each matching child
shows up on its own.
"""

from dataclasses import dataclass, field
from typing import Callable, List, Sequence

from decision_queue.core.models import DecisionItem
from decision_queue.engine.postprocess import PostprocessResult
from decision_queue.engine.selector import DASHBOARD_LIMIT, select_top_for_dashboard


@dataclass
class DecisionSlice:
    """Action and intel items for one view."""
    action: List[DecisionItem] = field(default_factory=list)
    intel: List[DecisionItem] = field(default_factory=list)


def flatten_for_filter(
    items: Sequence[DecisionItem],
    predicate: Callable[[DecisionItem], bool]
) -> List[DecisionItem]:
    """
    Filter items, looking inside rollups.

    A rollup contributes its matching children; an ordinary item
    contributes itself when it matches.
    """
    result: List[DecisionItem] = []
    for item in items:
        if item.is_rollup:
            result.extend(child for child in item.children if predicate(child))
        elif predicate(item):
            result.append(item)
    return result


def _context_equals(key: str, value: str) -> Callable[[DecisionItem], bool]:
    return lambda item: item.context.get(key) == value


def select_for_asset(result: PostprocessResult, asset_id: str) -> DecisionSlice:
    """Items referencing one asset."""
    predicate = _context_equals("assetId", asset_id)
    return DecisionSlice(
        action=flatten_for_filter(result.action_items, predicate),
        intel=flatten_for_filter(result.intel_items, predicate),
    )


def select_for_portfolio(result: PostprocessResult, portfolio_id: str) -> DecisionSlice:
    """Items referencing one portfolio."""
    predicate = _context_equals("portfolioId", portfolio_id)
    return DecisionSlice(
        action=flatten_for_filter(result.action_items, predicate),
        intel=flatten_for_filter(result.intel_items, predicate),
    )


def select_for_dashboard(result: PostprocessResult, limit: int = DASHBOARD_LIMIT) -> DecisionSlice:
    """Curated action rows plus the full intel list."""
    return DecisionSlice(
        action=select_top_for_dashboard(result.action_items, limit),
        intel=list(result.intel_items),
    )
