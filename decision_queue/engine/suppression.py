"""
Noise reduction before ranking: duplicate removal and conflict suppression.

Evaluators run independently, so the same signal can be emitted twice
for one entity, and some signals contradict each other (a proposal that
is already executing is no longer "awaiting decision").
"""

import logging
from typing import Dict, List, Sequence

from decision_queue.core.models import DecisionItem
from decision_queue.engine.scoring import severity_weight

logger = logging.getLogger(__name__)

# Evaluator id prefixes
PROPOSAL_PREFIX = "a1-proposal-"
EXECUTION_PREFIX = "a2-execution-"
UNSIMULATED_PREFIX = "a3-unsimulated-"
NO_ACTIVE_IDEA_PREFIX = "i3-ev-"

IDEA_PREFIXES = (PROPOSAL_PREFIX, EXECUTION_PREFIX, UNSIMULATED_PREFIX)

DEDUP_CONTEXT_KEYS = ("assetId", "proposalId", "tradeIdeaId", "projectId")


def dedup_key(item: DecisionItem) -> str:
    """
    Composite key identifying one signal about one entity.

    The first two id segments name the evaluator (e.g. 'a1-proposal',
    'thesis-stale'), so different signals for the same entity stay apart.
    """
    signal_type = "-".join(item.id.split("-")[:2])
    parts = [signal_type, str(item.category)]
    parts.extend(str(item.context.get(key) or "") for key in DEDUP_CONTEXT_KEYS)
    return ":".join(parts)


def dedupe_items(items: Sequence[DecisionItem]) -> List[DecisionItem]:
    """
    Keep one item per dedup key.

    The more severe item wins; on equal severity the first one is kept.
    Output follows the order in which each key was first seen.
    """
    kept: Dict[str, DecisionItem] = {}
    for item in items:
        key = dedup_key(item)
        existing = kept.get(key)
        if existing is None or severity_weight(item.severity) > severity_weight(existing.severity):
            kept[key] = item

    result = list(kept.values())
    if len(result) < len(items):
        logger.debug("Dropped %d duplicate items", len(items) - len(result))
    return result


def remove_conflicts(items: Sequence[DecisionItem]) -> List[DecisionItem]:
    """
    Suppress items contradicted by another item for the same asset.

    - "No active idea" intel is dropped when any idea, proposal or
      execution item exists for the asset.
    - "Proposal awaiting decision" is dropped when an execution item exists
      for the same trade idea.

    Rating follow-ups are independent signals and are never suppressed.
    """
    by_asset: Dict[str, List[DecisionItem]] = {}
    for item in items:
        asset_id = item.context.get("assetId")
        if not asset_id:
            continue
        by_asset.setdefault(asset_id, []).append(item)

    suppressed = set()
    for asset_items in by_asset.values():
        has_idea = any(i.id.startswith(IDEA_PREFIXES) for i in asset_items)
        executing_ideas = {
            i.context.get("tradeIdeaId")
            for i in asset_items
            if i.id.startswith(EXECUTION_PREFIX)
        }

        for item in asset_items:
            if has_idea and item.id.startswith(NO_ACTIVE_IDEA_PREFIX):
                suppressed.add(item.id)
            elif (
                item.id.startswith(PROPOSAL_PREFIX)
                and item.context.get("tradeIdeaId") in executing_ideas
            ):
                suppressed.add(item.id)

    if suppressed:
        logger.debug("Suppressed %d conflicting items: %s", len(suppressed), sorted(suppressed))
    return [item for item in items if item.id not in suppressed]
