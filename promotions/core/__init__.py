"""Condition evaluation engine for promotions."""

from promotions.core.amount import Amount, ComparisonOperator, compare
from promotions.core.condition_set import ConditionOperator, ConditionSet
from promotions.core.conditions import (
    Condition,
    ConditionScope,
    create_condition,
    register_condition,
)
from promotions.core.errors import InvalidConfiguration, PromotionError, UnitMismatch
from promotions.core.order import Order, OrderItem
from promotions.core.promotion import Promotion

__all__ = [
    "Amount",
    "ComparisonOperator",
    "compare",
    "Condition",
    "ConditionOperator",
    "ConditionScope",
    "ConditionSet",
    "create_condition",
    "register_condition",
    "InvalidConfiguration",
    "PromotionError",
    "UnitMismatch",
    "Order",
    "OrderItem",
    "Promotion",
]
