"""
Pydantic schemas for API request/response validation.

Item schemas mirror the camelCase DecisionItem shape consumed by the
frontend, so serialized items can be returned as-is.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


# =============================================================================
# Base Response Schemas
# =============================================================================

class ErrorResponse(BaseModel):
    """Error response for API errors."""
    detail: str
    code: Optional[str] = None


# =============================================================================
# Decision Item Schemas
# =============================================================================

class ChipSchema(BaseModel):
    """Labeled display value."""
    label: str
    value: str


class CallToActionSchema(BaseModel):
    """Action descriptor; payload is passed through untouched."""
    label: str
    actionKey: str
    kind: str = "primary"
    payload: Optional[Any] = None


class DecisionItemSchema(BaseModel):
    """Decision item as returned to the frontend."""
    id: str
    surface: str
    severity: str
    category: str
    title: str
    titleKey: Optional[str] = None
    description: str = ""
    chips: List[ChipSchema] = Field(default_factory=list)
    context: Dict[str, Any] = Field(default_factory=dict)
    ctas: List[CallToActionSchema] = Field(default_factory=list)
    dismissible: bool = False
    decisionTier: Optional[str] = None
    createdAt: Optional[str] = None
    sortScore: float = 0.0
    children: Optional[List["DecisionItemSchema"]] = None


DecisionItemSchema.model_rebuild()


# =============================================================================
# Request Schemas
# =============================================================================

class DecisionBatchRequest(BaseModel):
    """
    Request body carrying one evaluation pass.

    Items are raw evaluator records; they are parsed server-side so that
    unknown tiers and severities pass through instead of failing validation.
    """
    items: List[Dict[str, Any]] = Field(default_factory=list)
    now: Optional[str] = None  # ISO 8601, defaults to server time
    dedupe: Optional[bool] = None  # None = use config
    resolve_conflicts: Optional[bool] = None
    limit: Optional[int] = Field(default=None, ge=1)


# =============================================================================
# Response Schemas
# =============================================================================

class PostprocessMetaSchema(BaseModel):
    """Run summary."""
    generatedAt: str
    counts: Dict[str, int]
    rollupCount: int = 0


class PostprocessResponse(BaseModel):
    """Ordered output of the pipeline."""
    actionItems: List[DecisionItemSchema]
    intelItems: List[DecisionItemSchema]
    meta: PostprocessMetaSchema


class DashboardResponse(BaseModel):
    """Curated dashboard rows."""
    items: List[DecisionItemSchema]
    totalActionItems: int
    meta: PostprocessMetaSchema
