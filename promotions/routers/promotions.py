"""Promotions API router."""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from promotions.core.errors import InvalidConfiguration, UnitMismatch
from promotions.core.order import Order
from promotions.core.promotion import Promotion
from promotions.core.promotion_registry import PromotionRegistry, get_promotion_registry
from promotions.schemas.orders import OrderSchema
from promotions.schemas.promotions import (
    ApplicablePromotions,
    ConditionOperatorUpdate,
    ConditionResultResponse,
    PromotionEvaluation,
    ServiceResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/promotions", tags=["promotions"])


# ==================== Helpers ====================


def _get_promotion_or_404(registry: PromotionRegistry, promotion_id: str) -> Promotion:
    promotion = registry.get_promotion(promotion_id)
    if promotion is None:
        raise HTTPException(status_code=404, detail={"error": "PROMOTION_NOT_FOUND"})
    return promotion


def _build_order(payload: OrderSchema) -> Order:
    try:
        return payload.to_order()
    except InvalidConfiguration as e:
        raise HTTPException(
            status_code=422,
            detail={"error": "INVALID_CONFIGURATION", "message": str(e)},
        )


def _unit_mismatch(e: UnitMismatch) -> HTTPException:
    logger.warning(f"Unit mismatch during promotion evaluation: {e}")
    return HTTPException(
        status_code=409,
        detail={"error": "UNIT_MISMATCH", "message": str(e)},
    )


# ==================== Promotion Endpoints ====================


@router.get("")
async def list_promotions(
    registry: PromotionRegistry = Depends(get_promotion_registry),
) -> ServiceResponse:
    """List all configured promotions."""
    promotions = [p.to_dict() for p in registry.list_promotions()]
    return ServiceResponse(data={"promotions": promotions, "count": len(promotions)})


@router.post("/evaluate")
async def evaluate_all_promotions(
    payload: OrderSchema,
    on: Optional[date] = None,
    registry: PromotionRegistry = Depends(get_promotion_registry),
) -> ServiceResponse:
    """Return the ids of every promotion that applies to the order."""
    order = _build_order(payload)
    try:
        applicable = registry.applicable_promotions(order, today=on)
    except UnitMismatch as e:
        raise _unit_mismatch(e)

    result = ApplicablePromotions(
        promotion_ids=[p.promotion_id for p in applicable],
        count=len(applicable),
        evaluated_on=on.isoformat() if on else None,
    )
    return ServiceResponse(data=result.model_dump())


@router.get("/{promotion_id}")
async def get_promotion(
    promotion_id: str,
    registry: PromotionRegistry = Depends(get_promotion_registry),
) -> ServiceResponse:
    """Get a promotion definition by id."""
    promotion = _get_promotion_or_404(registry, promotion_id)
    return ServiceResponse(data=promotion.to_dict())


@router.post("/{promotion_id}/evaluate")
async def evaluate_promotion(
    promotion_id: str,
    payload: OrderSchema,
    on: Optional[date] = None,
    registry: PromotionRegistry = Depends(get_promotion_registry),
) -> ServiceResponse:
    """Evaluate one promotion against an order, with per-condition results."""
    promotion = _get_promotion_or_404(registry, promotion_id)
    order = _build_order(payload)

    try:
        result = promotion.evaluate(order, today=on)
    except UnitMismatch as e:
        raise _unit_mismatch(e)

    if result is None:
        evaluation = PromotionEvaluation(
            promotion_id=promotion.promotion_id,
            applies=False,
            available=False,
            operator=promotion.condition_operator.value,
        )
    else:
        evaluation = PromotionEvaluation(
            promotion_id=promotion.promotion_id,
            applies=result.applies,
            available=True,
            operator=result.operator.value,
            conditions=[ConditionResultResponse(**r.to_dict()) for r in result.results],
        )
    return ServiceResponse(data=evaluation.model_dump())


@router.put("/{promotion_id}/condition-operator")
async def set_condition_operator(
    promotion_id: str,
    request: ConditionOperatorUpdate,
    registry: PromotionRegistry = Depends(get_promotion_registry),
) -> ServiceResponse:
    """Switch a promotion between AND and OR."""
    promotion = _get_promotion_or_404(registry, promotion_id)
    try:
        promotion.set_condition_operator(request.operator)
    except InvalidConfiguration as e:
        raise HTTPException(
            status_code=422,
            detail={"error": "INVALID_CONFIGURATION", "message": str(e)},
        )
    return ServiceResponse(data=promotion.to_dict())
