"""
Data models for the decision queue
Defines decision items, their display chips and calls-to-action, and the
closed enumerations that drive ordering.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from decision_queue.core.exceptions import InvalidItemError


class _StrEnum(str, Enum):
    """String-valued enum that prints as its raw value."""

    def __str__(self) -> str:
        return self.value


class DecisionTier(_StrEnum):
    """Coarse priority bucket. Always dominates severity and age."""
    CAPITAL = "capital"
    INTEGRITY = "integrity"
    COVERAGE = "coverage"


class DecisionSeverity(_StrEnum):
    """Urgency color within a tier."""
    RED = "red"
    ORANGE = "orange"
    BLUE = "blue"
    GRAY = "gray"


class DecisionSurface(_StrEnum):
    """Whether an item asks for action or is informational."""
    ACTION = "action"
    INTEL = "intel"


class DecisionCategory(_StrEnum):
    """Display grouping, also used for dashboard diversity quotas."""
    PROCESS = "process"
    RISK = "risk"
    PROJECT = "project"
    ALPHA = "alpha"
    CATALYST = "catalyst"
    PROMPT = "prompt"


def coerce_enum(enum_cls, value):
    """
    Map a raw value onto an enum member when it is a known value.

    Unknown values are returned untouched so that new evaluator output
    keeps flowing through the pipeline with the lowest weights.
    """
    if value is None or isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        return value


def _pick(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first present key (camelCase or snake_case spelling)."""
    for key in keys:
        if key in data:
            return data[key]
    return default


@dataclass(frozen=True)
class Chip:
    """Small labeled display value"""
    label: str
    value: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Chip':
        return cls(label=str(data.get('label', '')), value=str(data.get('value', '')))

    def to_dict(self) -> Dict[str, str]:
        return {"label": self.label, "value": self.value}


@dataclass(frozen=True)
class CallToAction:
    """Action descriptor dispatched by the UI layer. The payload is opaque."""
    label: str
    action_key: str
    kind: str = "primary"
    payload: Optional[Any] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'CallToAction':
        return cls(
            label=data.get('label', ''),
            action_key=_pick(data, 'actionKey', 'action_key', default=''),
            kind=data.get('kind', 'primary'),
            payload=data.get('payload'),
        )

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "label": self.label,
            "actionKey": self.action_key,
            "kind": self.kind,
        }
        if self.payload is not None:
            result["payload"] = self.payload
        return result


@dataclass(frozen=True)
class DecisionItem:
    """
    One unit of attention-worthy work.

    Items are immutable. The pipeline never writes to a caller's item;
    scoring returns a copy with ``sort_score`` filled in.

    Attributes:
        id: Identifier derived from source entity ids, stable within a pass
        surface: 'action' or 'intel'
        severity: Urgency color (red > orange > blue > gray)
        category: Display category (process, risk, project, ...)
        decision_tier: capital > integrity > coverage; None ranks lowest
        title_key: Rule identifier, also the rollup grouping key
        context: Opaque entity references (assetId, portfolioName, ...)
        sort_score: Rank computed by the scoring engine
        children: Original items, only present on rollups
    """
    id: str
    surface: str = DecisionSurface.ACTION
    severity: str = DecisionSeverity.GRAY
    category: str = DecisionCategory.PROCESS
    title: str = ""
    title_key: Optional[str] = None
    description: str = ""
    chips: Tuple[Chip, ...] = ()
    context: Mapping[str, Any] = field(default_factory=dict)
    ctas: Tuple[CallToAction, ...] = ()
    dismissible: bool = False
    decision_tier: Optional[str] = None
    created_at: Optional[datetime] = None
    sort_score: float = 0.0
    children: Tuple['DecisionItem', ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'surface', coerce_enum(DecisionSurface, self.surface))
        object.__setattr__(self, 'severity', coerce_enum(DecisionSeverity, self.severity))
        object.__setattr__(self, 'category', coerce_enum(DecisionCategory, self.category))
        object.__setattr__(self, 'decision_tier', coerce_enum(DecisionTier, self.decision_tier))
        # Accept lists from callers, store tuples
        object.__setattr__(self, 'chips', tuple(self.chips or ()))
        object.__setattr__(self, 'ctas', tuple(self.ctas or ()))
        object.__setattr__(self, 'children', tuple(self.children or ()))
        if self.context is None:
            object.__setattr__(self, 'context', {})

    @property
    def is_rollup(self) -> bool:
        """Check if item is a synthetic rollup"""
        return len(self.children) > 0

    def with_score(self, score: float) -> 'DecisionItem':
        """Return a copy carrying the given sort score"""
        return replace(self, sort_score=score)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'DecisionItem':
        """
        Create DecisionItem from an evaluator record.

        Accepts both the camelCase keys emitted by the web evaluators and
        snake_case keys.

        Raises:
            InvalidItemError: If the record is not a mapping or has no id
        """
        if not isinstance(data, Mapping):
            raise InvalidItemError(f"Expected a mapping, got {type(data).__name__}")
        item_id = data.get('id')
        if item_id is None or item_id == "":
            raise InvalidItemError("Decision item is missing an id")

        return cls(
            id=str(item_id),
            surface=data.get('surface', DecisionSurface.ACTION),
            severity=data.get('severity', DecisionSeverity.GRAY),
            category=data.get('category', DecisionCategory.PROCESS),
            title=data.get('title') or "",
            title_key=_pick(data, 'titleKey', 'title_key'),
            description=data.get('description') or "",
            chips=tuple(Chip.from_dict(c) for c in data.get('chips') or ()),
            context=dict(data.get('context') or {}),
            ctas=tuple(CallToAction.from_dict(c) for c in data.get('ctas') or ()),
            dismissible=data.get('dismissible') is True,
            decision_tier=_pick(data, 'decisionTier', 'decision_tier'),
            created_at=cls._parse_datetime(_pick(data, 'createdAt', 'created_at')),
            sort_score=float(_pick(data, 'sortScore', 'sort_score', default=0) or 0),
            children=tuple(cls.from_dict(c) for c in data.get('children') or ()),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the camelCase shape consumed by the UI"""
        result: Dict[str, Any] = {
            "id": self.id,
            "surface": str(self.surface),
            "severity": str(self.severity),
            "category": str(self.category),
            "title": self.title,
            "titleKey": self.title_key,
            "description": self.description,
            "chips": [c.to_dict() for c in self.chips],
            "context": dict(self.context),
            "ctas": [c.to_dict() for c in self.ctas],
            "dismissible": self.dismissible,
            "decisionTier": str(self.decision_tier) if self.decision_tier is not None else None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "sortScore": self.sort_score,
        }
        if self.children:
            result["children"] = [c.to_dict() for c in self.children]
        return result

    @staticmethod
    def _parse_datetime(value: Any) -> Optional[datetime]:
        """Parse an ISO timestamp, assuming UTC when no offset is given"""
        if isinstance(value, datetime):
            return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
        if value:
            try:
                parsed = datetime.fromisoformat(str(value).replace('Z', '+00:00'))
            except (ValueError, TypeError):
                return None
            return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
        return None


def items_from_dicts(records: List[Mapping[str, Any]]) -> List[DecisionItem]:
    """Parse a list of evaluator records"""
    return [DecisionItem.from_dict(r) for r in records]
