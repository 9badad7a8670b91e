"""Pydantic schemas for promotion API requests and responses."""

from typing import Any, List, Optional

from pydantic import BaseModel, Field


class ServiceResponse(BaseModel):
    """Envelope for successful promotions API responses.

    Errors are raised as HTTPException with detail={"error": CODE, "message": ...}.
    """

    success: bool = True
    data: Optional[Any] = None


class ConditionOperatorUpdate(BaseModel):
    """Request to change how a promotion combines its conditions."""

    operator: str = Field(..., description="AND or OR")


class ConditionResultResponse(BaseModel):
    """Outcome of one condition."""

    plugin: str
    scope: str
    configuration: dict
    passed: bool


class PromotionEvaluation(BaseModel):
    """Verdict of one promotion for one order."""

    promotion_id: str
    applies: bool
    available: bool = Field(..., description="False when status/date/order type/store rejected the order")
    operator: str
    conditions: List[ConditionResultResponse] = Field(default_factory=list)


class ApplicablePromotions(BaseModel):
    """Promotions that apply to an order."""

    promotion_ids: List[str] = Field(default_factory=list)
    count: int = 0
    evaluated_on: Optional[str] = None
