"""
Rollup aggregation for decision items.

Collapses repetitive items that share a registered title key into one
synthetic summary item. The original items are kept as the rollup's
children so the UI can drill down without losing anything.
"""

import logging
from datetime import datetime
from typing import Dict, List, Mapping, Optional, Sequence

from decision_queue.core.exceptions import RollupTierMismatchError
from decision_queue.core.models import Chip, DecisionItem
from decision_queue.engine.policies import ROLLUP_POLICIES, RollupPolicy
from decision_queue.engine.scoring import as_utc, elapsed_days, severity_weight

logger = logging.getLogger(__name__)

UNKNOWN_BREAKDOWN_LABEL = "Unknown"


def breakdown_chips(children: Sequence[DecisionItem], dimension: str) -> List[Chip]:
    """
    Count children per context value of the breakdown dimension.

    Chips are sorted by count (descending); equal counts keep the order in
    which the value was first seen.

    Args:
        children: Items being rolled up
        dimension: Context key to group by (e.g. 'portfolioName')

    Returns:
        One chip per distinct value, label = value, value = count
    """
    counts: Dict[str, int] = {}
    for child in children:
        name = child.context.get(dimension) or UNKNOWN_BREAKDOWN_LABEL
        counts[str(name)] = counts.get(str(name), 0) + 1

    # sorted() is stable, so ties stay in first-seen order
    ordered = sorted(counts.items(), key=lambda entry: -entry[1])
    return [Chip(label=name, value=str(count)) for name, count in ordered]


def oldest_age_days(children: Sequence[DecisionItem], now: datetime) -> int:
    """Maximum age in whole days among the children (0 if none are dated)."""
    return max((elapsed_days(c.created_at, now) for c in children), default=0)


def oldest_created_at(children: Sequence[DecisionItem]) -> Optional[datetime]:
    """Earliest child timestamp, naive values read as UTC."""
    dated = [as_utc(c.created_at) for c in children if c.created_at is not None]
    return min(dated) if dated else None


def common_tier(title_key: str, children: Sequence[DecisionItem]) -> Optional[str]:
    """
    Return the decision tier shared by all children.

    Raises:
        RollupTierMismatchError: If the children carry more than one tier
    """
    tiers: List[Optional[str]] = []
    for child in children:
        tier = str(child.decision_tier) if child.decision_tier is not None else None
        if tier not in tiers:
            tiers.append(tier)

    if len(tiers) > 1:
        logger.error("Rollup group %s spans tiers %s", title_key, tiers)
        raise RollupTierMismatchError(title_key, tiers)

    return children[0].decision_tier


def highest_severity(children: Sequence[DecisionItem]) -> str:
    """Most urgent severity among the children (first one wins ties)."""
    best = children[0].severity
    for child in children[1:]:
        if severity_weight(child.severity) > severity_weight(best):
            best = child.severity
    return best


def build_rollup(
    policy: RollupPolicy,
    children: Sequence[DecisionItem],
    now: datetime
) -> DecisionItem:
    """
    Synthesize one rollup item for a qualifying group.

    Args:
        policy: Policy registered for the group's title key
        children: Group members, in input order
        now: Reference clock for the age description

    Returns:
        Unscored rollup item
    """
    tier = common_tier(policy.title_key, children)
    severity = policy.severity_override or highest_severity(children)
    category = policy.category_override or children[0].category

    return DecisionItem(
        id=policy.rollup_id,
        surface=children[0].surface,
        severity=severity,
        category=category,
        title=policy.label_template(len(children)),
        title_key=policy.title_key,
        description=policy.description_template(oldest_age_days(children, now)),
        chips=breakdown_chips(children, policy.breakdown_dimension),
        context={},
        ctas=(policy.make_cta(children),),
        dismissible=False,
        decision_tier=tier,
        created_at=oldest_created_at(children),
        children=tuple(children),
    )


def rollup_items(
    items: Sequence[DecisionItem],
    now: datetime,
    policies: Optional[Mapping[str, RollupPolicy]] = None
) -> List[DecisionItem]:
    """
    Collapse qualifying groups into rollup items.

    Items whose title key has no policy, or whose group is smaller than the
    policy's min_count, pass through unchanged.

    Args:
        items: Candidate items
        now: Reference clock
        policies: Policy table keyed by title key (defaults to ROLLUP_POLICIES)

    Returns:
        Rollups (in policy table order) followed by the remaining items in
        input order
    """
    if policies is None:
        policies = ROLLUP_POLICIES

    groups: Dict[str, List[DecisionItem]] = {key: [] for key in policies}
    for item in items:
        if item.title_key in groups:
            groups[item.title_key].append(item)

    rollups: List[DecisionItem] = []
    consumed_keys = set()
    for key, policy in policies.items():
        group = groups[key]
        if len(group) < policy.min_count:
            continue
        rollups.append(build_rollup(policy, group, now))
        consumed_keys.add(key)
        logger.debug("Rolled up %d %s items into %s", len(group), key, policy.rollup_id)

    remaining = [item for item in items if item.title_key not in consumed_keys]
    return rollups + remaining
