"""Condition kinds evaluated by promotions.

Every kind declares a scope and evaluates against either the whole order
(ORDER) or a single line item (ITEM). Kinds are registered by plugin id with
`register_condition`, and `create_condition` builds one from a
`{"plugin": ..., "configuration": {...}}` definition.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, ClassVar, Dict, List, Type, TypeVar

from promotions.core.amount import Amount, ComparisonOperator, compare
from promotions.core.errors import InvalidConfiguration
from promotions.core.order import LineItemLike, OrderLike


class ConditionScope(Enum):
    """What a condition is evaluated against."""
    ORDER = "order"
    ITEM = "item"


class Condition(ABC):
    """
    Immutable predicate over an order or one of its line items.

    Subclasses set `plugin_id` and `scope`, validate their configuration at
    construction time, and must not keep mutable state.
    """

    plugin_id: ClassVar[str] = ""
    scope: ClassVar[ConditionScope]

    @abstractmethod
    def evaluate(self, target: Any) -> bool:
        """Evaluate against an order (ORDER scope) or a line item (ITEM scope)."""

    @classmethod
    @abstractmethod
    def from_configuration(cls, configuration: Dict[str, Any]) -> "Condition":
        """Build the condition from its configuration mapping."""

    @abstractmethod
    def configuration(self) -> Dict[str, Any]:
        """Return the configuration mapping this condition was built from."""

    def to_dict(self) -> dict:
        return {"plugin": self.plugin_id, "configuration": self.configuration()}


# ============================================================================
# Registry
# ============================================================================

_CONDITION_TYPES: Dict[str, Type[Condition]] = {}

C = TypeVar("C", bound=Type[Condition])


def register_condition(plugin_id: str) -> Callable[[C], C]:
    """Class decorator registering a condition kind under `plugin_id`."""

    def decorator(cls: C) -> C:
        existing = _CONDITION_TYPES.get(plugin_id)
        if existing is not None and existing is not cls:
            raise ValueError(
                f"Condition plugin '{plugin_id}' already registered by {existing.__name__}"
            )
        cls.plugin_id = plugin_id
        _CONDITION_TYPES[plugin_id] = cls
        return cls

    return decorator


def get_condition_type(plugin_id: str) -> Type[Condition]:
    try:
        return _CONDITION_TYPES[plugin_id]
    except KeyError:
        raise InvalidConfiguration(
            f"Unknown condition plugin '{plugin_id}'. "
            f"Available: {sorted(_CONDITION_TYPES)}"
        ) from None


def available_conditions() -> List[str]:
    """Plugin ids of all registered condition kinds."""
    return sorted(_CONDITION_TYPES)


def create_condition(definition: Any) -> Condition:
    """
    Build a condition from a definition.

    Args:
        definition: Either a Condition (returned as is) or a mapping
            {"plugin": "order_total_price", "configuration": {...}}

    Raises:
        InvalidConfiguration: unknown plugin or invalid configuration
    """
    if isinstance(definition, Condition):
        return definition
    if not isinstance(definition, dict):
        raise InvalidConfiguration(
            f"Condition definition must be a mapping, got {type(definition).__name__}"
        )
    plugin_id = definition.get("plugin")
    if not plugin_id:
        raise InvalidConfiguration("Condition definition is missing 'plugin'")
    configuration = definition.get("configuration") or {}
    if not isinstance(configuration, dict):
        raise InvalidConfiguration(
            f"Configuration for condition '{plugin_id}' must be a mapping"
        )
    return get_condition_type(plugin_id).from_configuration(configuration)


# ============================================================================
# Configuration helpers
# ============================================================================

def _require(configuration: Dict[str, Any], key: str, plugin_id: str) -> Any:
    if key not in configuration or configuration[key] is None:
        raise InvalidConfiguration(f"Condition '{plugin_id}' requires '{key}'")
    return configuration[key]


def _non_negative_amount(value: Any, plugin_id: str) -> Amount:
    amount = Amount.from_dict(value)
    if amount.quantity < 0:
        raise InvalidConfiguration(
            f"Condition '{plugin_id}' amount must not be negative, got {amount}"
        )
    return amount


def _non_negative_int(value: Any, key: str, plugin_id: str) -> int:
    if isinstance(value, bool):
        raise InvalidConfiguration(f"Condition '{plugin_id}' {key} must be an integer")
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            raise InvalidConfiguration(
                f"Condition '{plugin_id}' {key} must be an integer, got {value!r}"
            ) from None
    if not isinstance(value, int):
        raise InvalidConfiguration(
            f"Condition '{plugin_id}' {key} must be an integer, got {value!r}"
        )
    if value < 0:
        raise InvalidConfiguration(
            f"Condition '{plugin_id}' {key} must not be negative, got {value}"
        )
    return value


# ============================================================================
# Amount thresholds
# ============================================================================

@dataclass(frozen=True)
class _AmountThresholdCondition(Condition):
    """Compares an amount taken from the target against a fixed threshold."""

    operator: ComparisonOperator
    amount: Amount

    def __post_init__(self):
        object.__setattr__(self, "operator", ComparisonOperator.parse(self.operator))
        object.__setattr__(self, "amount", _non_negative_amount(self.amount, self.plugin_id))

    @abstractmethod
    def _target_amount(self, target: Any) -> Amount:
        ...

    def evaluate(self, target: Any) -> bool:
        return compare(self._target_amount(target), self.operator, self.amount)

    @classmethod
    def from_configuration(cls, configuration: Dict[str, Any]) -> "Condition":
        return cls(
            operator=_require(configuration, "operator", cls.plugin_id),
            amount=_require(configuration, "amount", cls.plugin_id),
        )

    def configuration(self) -> Dict[str, Any]:
        return {"operator": self.operator.value, "amount": self.amount.to_dict()}


@register_condition("order_total_price")
@dataclass(frozen=True)
class OrderTotalPriceCondition(_AmountThresholdCondition):
    """Order total compared to an amount, e.g. "total > 100.00 USD"."""

    scope: ClassVar[ConditionScope] = ConditionScope.ORDER

    def _target_amount(self, target: OrderLike) -> Amount:
        return target.total()


@register_condition("order_item_unit_price")
@dataclass(frozen=True)
class OrderItemUnitPriceCondition(_AmountThresholdCondition):
    """Unit price of a line item compared to an amount."""

    scope: ClassVar[ConditionScope] = ConditionScope.ITEM

    def _target_amount(self, target: LineItemLike) -> Amount:
        return target.unit_price()


@register_condition("order_item_total_price")
@dataclass(frozen=True)
class OrderItemTotalPriceCondition(_AmountThresholdCondition):
    """Line subtotal (unit price times quantity) compared to an amount."""

    scope: ClassVar[ConditionScope] = ConditionScope.ITEM

    def _target_amount(self, target: LineItemLike) -> Amount:
        return target.subtotal()


# ============================================================================
# Integer thresholds
# ============================================================================

@register_condition("order_item_quantity")
@dataclass(frozen=True)
class OrderItemQuantityCondition(Condition):
    """Quantity of a line item compared to an integer threshold."""

    scope: ClassVar[ConditionScope] = ConditionScope.ITEM

    operator: ComparisonOperator
    quantity: int

    def __post_init__(self):
        object.__setattr__(self, "operator", ComparisonOperator.parse(self.operator))
        object.__setattr__(
            self, "quantity", _non_negative_int(self.quantity, "quantity", self.plugin_id)
        )

    def evaluate(self, target: LineItemLike) -> bool:
        return self.operator.apply(target.quantity(), self.quantity)

    @classmethod
    def from_configuration(cls, configuration: Dict[str, Any]) -> "Condition":
        return cls(
            operator=_require(configuration, "operator", cls.plugin_id),
            quantity=_require(configuration, "quantity", cls.plugin_id),
        )

    def configuration(self) -> Dict[str, Any]:
        return {"operator": self.operator.value, "quantity": self.quantity}


@register_condition("order_item_count")
@dataclass(frozen=True)
class OrderItemCountCondition(Condition):
    """Number of line items in the order compared to an integer threshold."""

    scope: ClassVar[ConditionScope] = ConditionScope.ORDER

    operator: ComparisonOperator
    count: int

    def __post_init__(self):
        object.__setattr__(self, "operator", ComparisonOperator.parse(self.operator))
        object.__setattr__(self, "count", _non_negative_int(self.count, "count", self.plugin_id))

    def evaluate(self, target: OrderLike) -> bool:
        return self.operator.apply(len(target.items()), self.count)

    @classmethod
    def from_configuration(cls, configuration: Dict[str, Any]) -> "Condition":
        return cls(
            operator=_require(configuration, "operator", cls.plugin_id),
            count=_require(configuration, "count", cls.plugin_id),
        )

    def configuration(self) -> Dict[str, Any]:
        return {"operator": self.operator.value, "count": self.count}
