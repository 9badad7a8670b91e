"""Condition sets: an ordered list of conditions combined by one operator."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, List, Optional, Tuple, Union

from promotions.core.conditions import Condition, ConditionScope, create_condition
from promotions.core.errors import InvalidConfiguration
from promotions.core.order import OrderLike

logger = logging.getLogger(__name__)


class ConditionOperator(Enum):
    """How per-condition results are combined."""
    AND = "AND"
    OR = "OR"

    @classmethod
    def parse(cls, value: Union[str, "ConditionOperator"]) -> "ConditionOperator":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                pass
        raise InvalidConfiguration(f"Condition operator must be AND or OR, got {value!r}")

    def combine(self, results: Iterable[bool]) -> bool:
        if self is ConditionOperator.AND:
            return all(results)
        return any(results)


@dataclass(frozen=True)
class ConditionResult:
    """Outcome of a single condition within a set."""
    condition: Condition
    passed: bool

    def to_dict(self) -> dict:
        data = self.condition.to_dict()
        data["scope"] = self.condition.scope.value
        data["passed"] = self.passed
        return data


@dataclass(frozen=True)
class EvaluationResult:
    """Per-condition results plus the combined verdict."""
    operator: ConditionOperator
    results: Tuple[ConditionResult, ...] = ()

    @property
    def applies(self) -> bool:
        if not self.results:
            return True
        return self.operator.combine(r.passed for r in self.results)

    def to_dict(self) -> dict:
        return {
            "applies": self.applies,
            "operator": self.operator.value,
            "conditions": [r.to_dict() for r in self.results],
        }


def evaluate_item_condition(condition: Condition, order: OrderLike) -> bool:
    """
    Existential reduction: an item condition holds if any line item satisfies it.

    Every item is evaluated before reducing, so a UnitMismatch on any line is
    raised regardless of item order.
    """
    results = [condition.evaluate(item) for item in order.items()]
    return any(results)


@dataclass(frozen=True)
class ConditionSet:
    """
    Immutable set of conditions and the operator combining them.

    An empty set always applies. Item-scoped conditions are reduced to one
    boolean per condition (any matching line item) before the operator is
    applied, so order and item conditions can be mixed freely.
    """
    conditions: Tuple[Condition, ...] = field(default_factory=tuple)
    operator: ConditionOperator = ConditionOperator.AND

    def __post_init__(self):
        object.__setattr__(
            self, "conditions", tuple(create_condition(c) for c in self.conditions)
        )
        object.__setattr__(self, "operator", ConditionOperator.parse(self.operator))

    @classmethod
    def from_list(
        cls,
        conditions: Optional[List[Any]] = None,
        operator: Union[str, ConditionOperator] = ConditionOperator.AND,
    ) -> "ConditionSet":
        """Create from condition definitions and an operator name."""
        return cls(conditions=tuple(conditions or ()), operator=operator)

    def with_operator(self, operator: Union[str, ConditionOperator]) -> "ConditionSet":
        """Return a copy using a different operator."""
        return ConditionSet(conditions=self.conditions, operator=operator)

    @property
    def order_conditions(self) -> Tuple[Condition, ...]:
        return tuple(c for c in self.conditions if c.scope is ConditionScope.ORDER)

    @property
    def item_conditions(self) -> Tuple[Condition, ...]:
        return tuple(c for c in self.conditions if c.scope is ConditionScope.ITEM)

    def evaluate(self, order: OrderLike) -> EvaluationResult:
        """
        Evaluate every condition against the order.

        Results keep the declared condition order. Errors raised by a
        condition (UnitMismatch) propagate to the caller.
        """
        results = []
        for condition in self.conditions:
            if condition.scope is ConditionScope.ITEM:
                passed = evaluate_item_condition(condition, order)
            else:
                passed = condition.evaluate(order)
            results.append(ConditionResult(condition=condition, passed=bool(passed)))
        return EvaluationResult(operator=self.operator, results=tuple(results))

    def applies(self, order: OrderLike) -> bool:
        """Single verdict for the order."""
        if not self.conditions:
            return True
        result = self.evaluate(order)
        logger.debug(
            "Condition set (%s) verdict %s: %s",
            self.operator.value,
            result.applies,
            [r.passed for r in result.results],
        )
        return result.applies

    def to_list(self) -> List[dict]:
        return [c.to_dict() for c in self.conditions]
