"""
Post-processing pipeline for decision items.

    1. Deduplication and conflict suppression (optional)
    2. Rollup aggregation of action items (intel stays flat)
    3. Sort score computation, including synthetic rollups
    4. Deterministic ordering

Every stage returns new collections; items handed in by the caller are
never modified.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence

from decision_queue.core.models import DecisionItem, DecisionSurface
from decision_queue.engine.policies import RollupPolicy
from decision_queue.engine.rollup import rollup_items
from decision_queue.engine.scoring import score_item, sort_items
from decision_queue.engine.suppression import dedupe_items, remove_conflicts

logger = logging.getLogger(__name__)


@dataclass
class PostprocessMeta:
    """Summary of one pipeline run."""
    generated_at: datetime
    counts: Dict[str, int] = field(default_factory=dict)
    rollup_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "generatedAt": self.generated_at.isoformat(),
            "counts": dict(self.counts),
            "rollupCount": self.rollup_count,
        }


@dataclass
class PostprocessResult:
    """Ordered output of the pipeline."""
    action_items: List[DecisionItem]
    intel_items: List[DecisionItem]
    meta: PostprocessMeta

    @property
    def action_ids(self) -> List[str]:
        return [item.id for item in self.action_items]


def _score_with_children(item: DecisionItem, now: datetime) -> DecisionItem:
    """Score an item; rollup children are scored too but keep their order."""
    if item.is_rollup:
        item = replace(item, children=tuple(score_item(c, now) for c in item.children))
    return score_item(item, now)


def postprocess(
    items: Sequence[DecisionItem],
    now: datetime,
    *,
    dedupe: bool = False,
    resolve_conflicts: bool = False,
    policies: Optional[Mapping[str, RollupPolicy]] = None
) -> PostprocessResult:
    """
    Roll up, score and order a batch of evaluator output.

    Args:
        items: Raw decision items from the evaluators
        now: Reference clock (injected so runs are reproducible)
        dedupe: Drop duplicate signals for the same entity first
        resolve_conflicts: Drop items contradicted by other items first
        policies: Rollup policy table (defaults to ROLLUP_POLICIES)

    Returns:
        PostprocessResult with score-ordered action and intel items
    """
    processed = list(items)

    if dedupe:
        processed = dedupe_items(processed)

    if resolve_conflicts:
        processed = remove_conflicts(processed)

    action_candidates = [i for i in processed if i.surface == DecisionSurface.ACTION]
    other_candidates = [i for i in processed if i.surface != DecisionSurface.ACTION]

    rolled_up = rollup_items(action_candidates, now, policies)
    rollup_count = sum(1 for item in rolled_up if item.is_rollup)

    action_items = sort_items(_score_with_children(item, now) for item in rolled_up)
    intel_items = sort_items(score_item(item, now) for item in other_candidates)

    logger.debug(
        "Postprocessed %d items into %d action (%d rollups) and %d intel",
        len(items), len(action_items), rollup_count, len(intel_items),
    )

    return PostprocessResult(
        action_items=action_items,
        intel_items=intel_items,
        meta=PostprocessMeta(
            generated_at=now,
            counts={"action": len(action_items), "intel": len(intel_items)},
            rollup_count=rollup_count,
        ),
    )
