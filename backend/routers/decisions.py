"""
Decision queue API endpoints.

Runs evaluator output through the post-processing pipeline and the
dashboard selector.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from backend.dependencies import get_config
from backend.schemas import (
    DashboardResponse,
    DecisionBatchRequest,
    DecisionItemSchema,
    ErrorResponse,
    PostprocessMetaSchema,
    PostprocessResponse,
)
from decision_queue.core.config import Config
from decision_queue.core.exceptions import InvalidItemError, RollupTierMismatchError
from decision_queue.core.models import DecisionItem
from decision_queue.engine.postprocess import PostprocessResult, postprocess
from decision_queue.engine.selector import select_top_for_dashboard

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/decisions", tags=["decisions"])

ERROR_RESPONSES = {
    409: {"model": ErrorResponse, "description": "Rollup group spans several decision tiers"},
}


def _parse_now(value: Optional[str]) -> datetime:
    if not value:
        return datetime.now(timezone.utc)
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Invalid 'now' timestamp: {value}")
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def _parse_items(request: DecisionBatchRequest) -> List[DecisionItem]:
    try:
        return [DecisionItem.from_dict(record) for record in request.items]
    except InvalidItemError as e:
        raise HTTPException(status_code=422, detail=str(e))


def _run(request: DecisionBatchRequest, config: Config) -> PostprocessResult:
    """Parse the batch and run postprocess with request or config options."""
    items = _parse_items(request)
    now = _parse_now(request.now)
    dedupe = config.dedupe if request.dedupe is None else request.dedupe
    resolve = config.resolve_conflicts if request.resolve_conflicts is None else request.resolve_conflicts

    try:
        return postprocess(items, now, dedupe=dedupe, resolve_conflicts=resolve)
    except RollupTierMismatchError as e:
        logger.warning("Rejected batch: %s", e)
        raise HTTPException(status_code=409, detail=str(e))


def _serialize(items: List[DecisionItem]) -> List[DecisionItemSchema]:
    return [DecisionItemSchema(**item.to_dict()) for item in items]


def _meta(result: PostprocessResult) -> PostprocessMetaSchema:
    return PostprocessMetaSchema(**result.meta.to_dict())


@router.post("/postprocess", response_model=PostprocessResponse, responses=ERROR_RESPONSES)
async def postprocess_batch(
    request: DecisionBatchRequest,
    config: Config = Depends(get_config),
):
    """
    Roll up, score and order one evaluation pass.

    Returns every action item in score order plus the flat intel list.
    """
    result = _run(request, config)

    return PostprocessResponse(
        actionItems=_serialize(result.action_items),
        intelItems=_serialize(result.intel_items),
        meta=_meta(result),
    )


@router.post("/dashboard", response_model=DashboardResponse, responses=ERROR_RESPONSES)
async def dashboard_batch(
    request: DecisionBatchRequest,
    config: Config = Depends(get_config),
):
    """
    Curated dashboard rows for one evaluation pass.

    At most `limit` (default from config, normally 6) items, with tier
    and category diversity.
    """
    result = _run(request, config)
    curated = select_top_for_dashboard(result.action_items, request.limit or config.dashboard_limit)

    return DashboardResponse(
        items=_serialize(curated),
        totalActionItems=len(result.action_items),
        meta=_meta(result),
    )
