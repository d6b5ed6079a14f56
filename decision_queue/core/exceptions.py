"""
Exceptions raised by the decision queue pipeline.

Only upstream defects surface as exceptions; unknown tiers, severities
and title keys degrade to the lowest weight instead.
"""


class DecisionQueueError(Exception):
    """Base class for all decision queue errors."""


class InvalidItemError(DecisionQueueError):
    """A raw record could not be parsed into a DecisionItem."""


class RollupTierMismatchError(DecisionQueueError):
    """Items grouped under one rollup policy carry different decision tiers."""

    def __init__(self, title_key: str, tiers):
        self.title_key = title_key
        self.tiers = tuple(tiers)
        super().__init__(
            f"Cannot roll up {title_key}: children span tiers {', '.join(str(t) for t in self.tiers)}"
        )
