"""
Unit tests for dashboard curation.
Tests top-N selection, tier and category diversity, and backfill.
"""

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from decision_queue.core.models import DecisionItem
from decision_queue.engine.scoring import sort_items
from decision_queue.engine.selector import DASHBOARD_LIMIT, select_top_for_dashboard


def make_item(item_id, score, tier="capital", category="process"):
    return DecisionItem(
        id=item_id,
        severity="orange",
        category=category,
        title=item_id,
        decision_tier=tier,
        sort_score=score,
    )


def ids(items):
    return [i.id for i in items]


class TestSmallInput:
    """Six or fewer items are returned as-is."""

    @pytest.mark.parametrize("count", [0, 1, 6])
    def test_returns_all_items(self, count):
        items = sort_items(make_item(f"item-{n}", 1000 - n) for n in range(count))

        result = select_top_for_dashboard(items)

        assert result == items
        assert result is not items

    def test_default_limit_is_six(self):
        assert DASHBOARD_LIMIT == 6


class TestTierDiversity:
    """Every tier present in the input gets a row."""

    def test_low_scoring_tiers_are_pulled_in(self):
        items = sort_items(
            [make_item(f"c{n}", 33000 - n * 100) for n in range(1, 7)]
            + [
                make_item("i1", 22000, tier="integrity", category="project"),
                make_item("v1", 11000, tier="coverage", category="risk"),
            ]
        )

        result = select_top_for_dashboard(items)

        assert ids(result) == ["c1", "c2", "c3", "c4", "i1", "v1"]
        assert {str(i.decision_tier) for i in result} == {"capital", "integrity", "coverage"}

    def test_highest_scoring_item_of_missing_tier_is_chosen(self):
        items = sort_items(
            [make_item(f"c{n}", 33000 - n * 100) for n in range(1, 7)]
            + [
                make_item("v-low", 10100, tier="coverage"),
                make_item("v-high", 11500, tier="coverage"),
            ]
        )

        result = select_top_for_dashboard(items)

        assert "v-high" in ids(result)
        assert "v-low" not in ids(result)


class TestCategoryDiversity:
    """Core categories present in the input get a row."""

    def test_missing_categories_are_pulled_in(self):
        items = sort_items(
            [make_item(f"p{n}", 33000 - n * 100) for n in range(1, 8)]
            + [
                make_item("r1", 30100, category="risk"),
                make_item("j1", 30200, category="project"),
            ]
        )

        result = select_top_for_dashboard(items)

        assert ids(result) == ["p1", "p2", "p3", "p4", "j1", "r1"]

    def test_other_categories_only_fill_by_score(self):
        """Alpha/catalyst items get no reserved slot."""
        items = sort_items(
            [make_item(f"p{n}", 33000 - n * 100) for n in range(1, 8)]
            + [make_item("alpha", 30000, category="alpha")]
        )

        result = select_top_for_dashboard(items)

        assert "alpha" not in ids(result)


class TestBudget:
    """Capacity limits and ordering of the final selection."""

    def test_never_exceeds_limit_and_no_duplicates(self):
        items = sort_items(
            make_item(f"item-{n}", 30000 - n, tier=("capital", "integrity", "coverage")[n % 3],
                      category=("process", "risk", "project", "alpha")[n % 4])
            for n in range(40)
        )

        result = select_top_for_dashboard(items)

        assert len(result) == 6
        assert len(set(ids(result))) == 6

    def test_earlier_passes_can_exhaust_budget(self):
        """With room for three, coverage loses its slot to integrity."""
        items = sort_items([
            make_item("c1", 33000),
            make_item("c2", 32000),
            make_item("c3", 31000),
            make_item("i1", 21000, tier="integrity"),
            make_item("v1", 11000, tier="coverage"),
        ])

        result = select_top_for_dashboard(items, limit=3)

        assert ids(result) == ["c1", "c2", "i1"]

    def test_result_is_in_comparator_order(self):
        items = sort_items(
            [make_item(f"c{n}", 33000 - n * 100) for n in range(1, 8)]
            + [make_item("v1", 11000, tier="coverage", category="risk")]
        )

        result = select_top_for_dashboard(items)

        assert result == sort_items(result)
        assert ids(result)[-1] == "v1"

    def test_equal_scores_break_ties_by_id(self):
        items = sort_items(make_item(f"item-{n}", 5000) for n in range(9))

        result = select_top_for_dashboard(items)

        assert ids(result) == [f"item-{n}" for n in range(6)]
