"""
Dashboard curation ("Rule of 6").

Picks at most six items from the score-ordered action list so that the
highest-scoring items appear first while every decision tier and every
core category present in the input gets a row.
"""

import logging
from typing import List, Sequence

from decision_queue.core.models import DecisionCategory, DecisionItem
from decision_queue.engine.scoring import TIER_ORDER, sort_items

logger = logging.getLogger(__name__)

DASHBOARD_LIMIT = 6
TOP_UNCONDITIONAL = 2

CATEGORY_ORDER = (DecisionCategory.PROCESS, DecisionCategory.RISK, DecisionCategory.PROJECT)


class _Selection:
    """Growing, capacity-bounded selection over a ranked candidate list."""

    def __init__(self, ranked: Sequence[DecisionItem], limit: int):
        self.ranked = ranked
        self.limit = limit
        self.items: List[DecisionItem] = []
        self._ids = set()

    @property
    def full(self) -> bool:
        return len(self.items) >= self.limit

    def add(self, item: DecisionItem) -> None:
        if self.full or item.id in self._ids:
            return
        self.items.append(item)
        self._ids.add(item.id)

    def covers(self, attribute: str, value: str) -> bool:
        return any(str(getattr(i, attribute)) == str(value) for i in self.items)

    def best_unselected(self, attribute: str, value: str):
        for item in self.ranked:
            if item.id not in self._ids and str(getattr(item, attribute)) == str(value):
                return item
        return None

    def ensure(self, attribute: str, values) -> None:
        """Add the best unselected item for every value not yet covered."""
        for value in values:
            if self.full:
                return
            if self.covers(attribute, value):
                continue
            candidate = self.best_unselected(attribute, value)
            if candidate is not None:
                logger.debug("Adding %s for %s=%s", candidate.id, attribute, value)
                self.add(candidate)


def select_top_for_dashboard(
    sorted_action_items: Sequence[DecisionItem],
    limit: int = DASHBOARD_LIMIT
) -> List[DecisionItem]:
    """
    Curate the dashboard rows.

    Passes, each only while capacity remains:
        1. The two highest-scoring items
        2. One item per missing tier (capital, integrity, coverage)
        3. One item per missing category (process, risk, project)
        4. Backfill with the next highest-scoring items

    Diversity is best effort: earlier passes can use up the budget.

    Args:
        sorted_action_items: Output of postprocess, highest score first
        limit: Maximum number of rows

    Returns:
        At most `limit` items without duplicates, in comparator order
    """
    if len(sorted_action_items) <= limit:
        return list(sorted_action_items)

    ranked = sort_items(sorted_action_items)
    selection = _Selection(ranked, limit)

    for item in ranked[:TOP_UNCONDITIONAL]:
        selection.add(item)

    selection.ensure("decision_tier", TIER_ORDER)
    selection.ensure("category", CATEGORY_ORDER)

    for item in ranked:
        if selection.full:
            break
        selection.add(item)

    return sort_items(selection.items)
