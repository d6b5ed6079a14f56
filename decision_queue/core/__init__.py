"""
Core module for the decision queue
Contains configuration, exceptions, and model definitions
"""

from .config import Config
from .exceptions import DecisionQueueError, InvalidItemError, RollupTierMismatchError
from .models import (
    CallToAction,
    Chip,
    DecisionCategory,
    DecisionItem,
    DecisionSeverity,
    DecisionSurface,
    DecisionTier,
    items_from_dicts,
)

__all__ = [
    'Config',
    'DecisionQueueError',
    'InvalidItemError',
    'RollupTierMismatchError',
    'CallToAction',
    'Chip',
    'DecisionCategory',
    'DecisionItem',
    'DecisionSeverity',
    'DecisionSurface',
    'DecisionTier',
    'items_from_dicts',
]
