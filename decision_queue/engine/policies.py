"""
Rollup policy table.

Each rollup-eligible title key is described by one declarative
RollupPolicy. Adding a new rollup type means adding an entry to
ROLLUP_POLICIES; the aggregation algorithm does not change.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Sequence

from decision_queue.core.models import (
    CallToAction,
    DecisionCategory,
    DecisionItem,
    DecisionSeverity,
)


DEFAULT_MIN_COUNT = 3


@dataclass(frozen=True)
class RollupPolicy:
    """
    How one title key collapses into a summary item.

    Attributes:
        title_key: Rule identifier the policy applies to
        rollup_id: Fixed id of the synthetic item
        label_template: count -> rollup title
        description_template: oldest child age in days -> description
        cta_label: Label of the aggregate CTA
        cta_action_key: Action key of the aggregate CTA
        cta_payload: children -> opaque CTA payload
        breakdown_dimension: Context key the chips are counted by
        min_count: Smallest group that is rolled up
        severity_override: Fixed severity, or None to use the highest child severity
        category_override: Fixed category, or None to use the first child's category
    """
    title_key: str
    rollup_id: str
    label_template: Callable[[int], str]
    description_template: Callable[[int], str]
    cta_label: str
    cta_action_key: str
    cta_payload: Optional[Callable[[Sequence[DecisionItem]], Dict[str, Any]]] = None
    breakdown_dimension: str = "portfolioName"
    min_count: int = DEFAULT_MIN_COUNT
    severity_override: Optional[str] = None
    category_override: Optional[str] = None

    def make_cta(self, children: Sequence[DecisionItem]) -> CallToAction:
        """Build the single aggregate CTA for a rollup"""
        payload = self.cta_payload(children) if self.cta_payload else None
        return CallToAction(
            label=self.cta_label,
            action_key=self.cta_action_key,
            kind="primary",
            payload=payload,
        )


def rollup_id_for(title_key: str) -> str:
    """Stable rollup id for a title key, e.g. rollup-idea-not-simulated"""
    return "rollup-" + title_key.lower().replace("_", "-")


def _asset_ids(children: Sequence[DecisionItem]) -> Dict[str, Any]:
    return {"assetIds": [c.context.get("assetId") for c in children if c.context.get("assetId")]}


PROPOSAL_AWAITING_DECISION = RollupPolicy(
    title_key="PROPOSAL_AWAITING_DECISION",
    rollup_id=rollup_id_for("PROPOSAL_AWAITING_DECISION"),
    label_template=lambda n: f"{n} proposals awaiting decision",
    description_template=lambda days: f"Oldest waiting {days} days.",
    cta_label="Review all",
    cta_action_key="OPEN_TRADE_QUEUE_FILTERED",
    cta_payload=lambda children: {"filter": "awaiting_decision"},
    category_override=DecisionCategory.PROCESS,
)

THESIS_STALE = RollupPolicy(
    title_key="THESIS_STALE",
    rollup_id=rollup_id_for("THESIS_STALE"),
    label_template=lambda n: f"{n} theses may be stale",
    description_template=lambda days: f"Oldest {days} days since update.",
    cta_label="Review",
    cta_action_key="OPEN_ASSET_REVIEW_SEQUENCE",
    cta_payload=_asset_ids,
    category_override=DecisionCategory.RISK,
)

IDEA_NOT_SIMULATED = RollupPolicy(
    title_key="IDEA_NOT_SIMULATED",
    rollup_id=rollup_id_for("IDEA_NOT_SIMULATED"),
    label_template=lambda n: f"{n} ideas not simulated",
    description_template=lambda days: f"Oldest waiting {days} days.",
    cta_label="Simulate all",
    cta_action_key="OPEN_TRADE_QUEUE_FILTER",
    cta_payload=lambda children: {"filter": "unsimulated"},
    severity_override=DecisionSeverity.ORANGE,
    category_override=DecisionCategory.PROCESS,
)

# Processed in this order; rollups are emitted in the same order
ROLLUP_POLICIES: Mapping[str, RollupPolicy] = {
    policy.title_key: policy
    for policy in (PROPOSAL_AWAITING_DECISION, THESIS_STALE, IDEA_NOT_SIMULATED)
}
