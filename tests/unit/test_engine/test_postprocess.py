"""
Unit tests for the postprocess pipeline.
Tests ordering, surface partitioning, immutability and determinism.
"""

import copy
import random
from datetime import datetime, timedelta, timezone

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from decision_queue.core.models import DecisionItem
from decision_queue.engine.postprocess import postprocess
from decision_queue.engine.scoring import compute_sort_score


NOW = datetime(2026, 2, 15, 12, 0, tzinfo=timezone.utc)


def days_ago(n: int) -> datetime:
    return NOW - timedelta(days=n)


def make_item(item_id, tier="capital", severity="orange", age_days=3, surface="action", **kwargs):
    return DecisionItem(
        id=item_id,
        surface=surface,
        severity=severity,
        category=kwargs.pop("category", "process"),
        title=kwargs.pop("title", item_id),
        decision_tier=tier,
        created_at=days_ago(age_days),
        **kwargs,
    )


def unsimulated(n, age_days, tier="capital", portfolio="Growth"):
    return make_item(
        f"a3-unsimulated-{n}",
        tier=tier,
        age_days=age_days,
        title_key="IDEA_NOT_SIMULATED",
        context={"assetId": f"asset-{n}", "portfolioName": portfolio, "tradeIdeaId": f"idea-{n}"},
    )


def mixed_batch():
    return [
        make_item("thesis-stale-x-agg", tier="coverage", severity="red", age_days=200, category="risk"),
        unsimulated(1, 5),
        make_item("a4-deliverable-1", tier="integrity", severity="red", age_days=8, category="project"),
        unsimulated(2, 7, portfolio="Value"),
        make_item("i1-rating-1", surface="intel", tier=None, severity="blue", age_days=1, category="alpha"),
        unsimulated(3, 4, portfolio="Core"),
        make_item("a1-proposal-9", tier="capital", severity="red", age_days=2),
        make_item("i2-catalyst-1", surface="intel", tier=None, severity="orange", age_days=0, category="catalyst"),
    ]


class TestOrdering:
    """Tests for scoring and ordering of action items."""

    def test_actions_sorted_by_score_descending(self):
        result = postprocess(mixed_batch(), NOW)

        scores = [i.sort_score for i in result.action_items]
        assert scores == sorted(scores, reverse=True)

    def test_tier_grouping_holds_in_output(self):
        """All capital items precede integrity, which precede coverage."""
        result = postprocess(mixed_batch(), NOW)

        tiers = [str(i.decision_tier) for i in result.action_items]
        assert tiers == ["capital", "capital", "integrity", "coverage"]

    def test_capital_young_outranks_coverage_old(self):
        items = [
            make_item("cov", tier="coverage", severity="red", age_days=200),
            make_item("cap", tier="capital", severity="orange", age_days=3),
        ]

        assert postprocess(items, NOW).action_ids == ["cap", "cov"]

    def test_every_item_is_scored(self):
        result = postprocess(mixed_batch(), NOW)

        for item in result.action_items + result.intel_items:
            assert item.sort_score > 0

    def test_rollup_scored_by_oldest_child(self):
        """Rollup age bonus comes from its oldest child."""
        items = [unsimulated(1, 5), unsimulated(2, 40), unsimulated(3, 4)]

        rollup = postprocess(items, NOW).action_items[0]

        assert rollup.is_rollup
        expected = compute_sort_score(make_item("ref", severity="orange", age_days=40), NOW)
        assert rollup.sort_score == expected

    def test_rollup_children_scored_and_kept_in_order(self):
        items = [unsimulated(1, 5), unsimulated(2, 40), unsimulated(3, 4)]

        rollup = postprocess(items, NOW).action_items[0]

        assert [c.id for c in rollup.children] == [i.id for i in items]
        assert all(c.sort_score > 0 for c in rollup.children)


class TestSurfacePartition:
    """Tests for splitting action and intel items."""

    def test_only_action_items_in_action_list(self):
        result = postprocess(mixed_batch(), NOW)

        assert all(str(i.surface) == "action" for i in result.action_items)
        assert [i.id for i in result.intel_items] == ["i2-catalyst-1", "i1-rating-1"]

    def test_intel_items_never_roll_up(self):
        items = [
            make_item(f"i-{n}", surface="intel", title_key="IDEA_NOT_SIMULATED", age_days=n)
            for n in range(4)
        ]

        result = postprocess(items, NOW)

        assert result.action_items == []
        assert len(result.intel_items) == 4
        assert not any(i.is_rollup for i in result.intel_items)

    def test_meta_counts(self):
        result = postprocess(mixed_batch(), NOW)

        assert result.meta.counts == {"action": 4, "intel": 2}
        assert result.meta.rollup_count == 1
        assert result.meta.generated_at == NOW
        assert result.meta.to_dict()["rollupCount"] == 1


class TestDeterminism:
    """The pipeline is pure and reproducible."""

    def test_copy_of_input_yields_same_order(self):
        items = mixed_batch()

        first = postprocess(items, NOW).action_ids
        second = postprocess(copy.deepcopy(items), NOW).action_ids

        assert first == second

    def test_shuffled_input_yields_same_order(self):
        items = [make_item(f"item-{n}", severity="red", age_days=5) for n in range(10)]
        shuffled = list(items)
        random.Random(7).shuffle(shuffled)

        assert postprocess(items, NOW).action_ids == postprocess(shuffled, NOW).action_ids

    def test_input_items_not_modified(self):
        items = mixed_batch()
        snapshot = copy.deepcopy(items)

        postprocess(items, NOW)

        assert items == snapshot
        assert all(i.sort_score == 0.0 for i in items)

    def test_empty_batch(self):
        result = postprocess([], NOW)

        assert result.action_items == []
        assert result.intel_items == []
        assert result.meta.rollup_count == 0


class TestSuppressionFlags:
    """Dedupe and conflict suppression are opt-in."""

    def _duplicates(self):
        context = {"assetId": "asset-1", "tradeIdeaId": "idea-1"}
        return [
            make_item("a1-proposal-1", severity="orange", context=context),
            make_item("a1-proposal-1-dup", severity="red", context=context),
        ]

    def test_duplicates_kept_by_default(self):
        assert len(postprocess(self._duplicates(), NOW).action_items) == 2

    def test_dedupe_keeps_more_severe(self):
        result = postprocess(self._duplicates(), NOW, dedupe=True)

        assert result.action_ids == ["a1-proposal-1-dup"]

    def test_resolve_conflicts_drops_executing_proposal(self):
        items = [
            make_item("a1-proposal-1", context={"assetId": "asset-1", "tradeIdeaId": "idea-1"}),
            make_item("a2-execution-1", context={"assetId": "asset-1", "tradeIdeaId": "idea-1"}),
        ]

        assert len(postprocess(items, NOW).action_items) == 2
        assert postprocess(items, NOW, resolve_conflicts=True).action_ids == ["a2-execution-1"]
