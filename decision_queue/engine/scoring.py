"""
Sort score computation for decision items.

Ranks items so that tier always dominates severity, and severity always
dominates age.

Score formula:
    score = TIER_WEIGHT[tier] + SEVERITY_WEIGHT[severity] + age_bonus(days)

The age bonus is capped below the smallest severity gap, so age only
breaks ties inside one tier + severity bucket.
"""

from datetime import datetime, timezone
from functools import cmp_to_key
from typing import Any, Dict, Iterable, List, Optional

from decision_queue.core.models import DecisionItem, DecisionSeverity, DecisionTier


TIER_WEIGHT: Dict[str, int] = {
    DecisionTier.CAPITAL.value: 30000,
    DecisionTier.INTEGRITY.value: 20000,
    DecisionTier.COVERAGE.value: 10000,
}

# Unknown or missing tiers
UNKNOWN_TIER_WEIGHT = 0

SEVERITY_WEIGHT: Dict[str, int] = {
    DecisionSeverity.RED.value: 3000,
    DecisionSeverity.ORANGE.value: 2000,
    DecisionSeverity.BLUE.value: 1000,
    DecisionSeverity.GRAY.value: 0,
}

UNKNOWN_SEVERITY_WEIGHT = 0

AGE_BONUS_PER_DAY = 5
AGE_BONUS_CAP_DAYS = 180

# Priority order of tiers, highest first
TIER_ORDER = (DecisionTier.CAPITAL, DecisionTier.INTEGRITY, DecisionTier.COVERAGE)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes; aware ones are returned as-is."""
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def elapsed_days(created_at: Optional[datetime], now: datetime) -> int:
    """
    Whole days elapsed between created_at and now.

    Missing timestamps and timestamps in the future count as 0 days.
    """
    if created_at is None:
        return 0
    seconds = (as_utc(now) - as_utc(created_at)).total_seconds()
    if seconds <= 0:
        return 0
    return int(seconds // 86400)


def tier_weight(tier: Optional[str]) -> int:
    """Weight of a decision tier (unknown tiers rank below coverage)."""
    if tier is None:
        return UNKNOWN_TIER_WEIGHT
    return TIER_WEIGHT.get(str(tier), UNKNOWN_TIER_WEIGHT)


def severity_weight(severity: Optional[str]) -> int:
    """Weight of a severity (unknown severities rank with gray)."""
    if severity is None:
        return UNKNOWN_SEVERITY_WEIGHT
    return SEVERITY_WEIGHT.get(str(severity), UNKNOWN_SEVERITY_WEIGHT)


def age_bonus(days: int) -> int:
    """
    Calculate the age bonus for an item waiting the given number of days.

    Monotonically non-decreasing, capped at AGE_BONUS_CAP_DAYS so the
    bonus (max 900) never reaches the 1000 point severity gap.

    Args:
        days: Whole elapsed days

    Returns:
        Bonus points
    """
    return AGE_BONUS_PER_DAY * max(0, min(days, AGE_BONUS_CAP_DAYS))


def compute_sort_score(item: DecisionItem, now: datetime) -> float:
    """
    Compute the sort score for one item.

    Args:
        item: Item to score
        now: Reference clock

    Returns:
        Numeric rank (higher is more urgent)
    """
    return float(
        tier_weight(item.decision_tier)
        + severity_weight(item.severity)
        + age_bonus(elapsed_days(item.created_at, now))
    )


def score_item(item: DecisionItem, now: datetime) -> DecisionItem:
    """Return a copy of item carrying its computed sort score."""
    return item.with_score(compute_sort_score(item, now))


def score_breakdown(item: DecisionItem, now: datetime) -> Dict[str, Any]:
    """
    Build a per-component breakdown of an item's score for transparency.

    Args:
        item: Item to explain
        now: Reference clock

    Returns:
        Dict with tier, severity and age components plus the total
    """
    days = elapsed_days(item.created_at, now)
    tier = tier_weight(item.decision_tier)
    severity = severity_weight(item.severity)
    age = age_bonus(days)
    return {
        "tier": {
            "value": str(item.decision_tier) if item.decision_tier is not None else None,
            "weight": tier,
        },
        "severity": {
            "value": str(item.severity),
            "weight": severity,
        },
        "age": {
            "days": days,
            "capped_days": min(days, AGE_BONUS_CAP_DAYS),
            "weight": age,
        },
        "total": float(tier + severity + age),
    }


def compare_items(a: DecisionItem, b: DecisionItem) -> int:
    """
    Comparator for deterministic ordering.

    Higher sort score first; equal scores fall back to ascending id, so two
    distinct ids never compare equal.

    Returns:
        Negative if a sorts before b, positive if after, 0 only for the same id
    """
    if a.sort_score != b.sort_score:
        return -1 if a.sort_score > b.sort_score else 1
    if a.id != b.id:
        return -1 if a.id < b.id else 1
    return 0


def sort_items(items: Iterable[DecisionItem]) -> List[DecisionItem]:
    """Return a new list sorted with compare_items."""
    return sorted(items, key=cmp_to_key(compare_items))
