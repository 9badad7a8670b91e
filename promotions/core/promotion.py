"""Promotion: eligibility pre-filters plus a condition set."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from threading import Lock
from typing import Any, List, Optional, Union

from promotions.core.condition_set import ConditionOperator, ConditionSet, EvaluationResult
from promotions.core.errors import InvalidConfiguration
from promotions.core.order import OrderLike

logger = logging.getLogger(__name__)


def _parse_date(value: Any, field_name: str) -> Optional[date]:
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise InvalidConfiguration(
            f"Promotion {field_name} must be an ISO date (YYYY-MM-DD), got {value!r}"
        ) from None


def _string_list(value: Any, field_name: str, promotion_id: str) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise InvalidConfiguration(
            f"Promotion '{promotion_id}' {field_name} must be a list, "
            f"got {type(value).__name__}"
        )
    for entry in value:
        if isinstance(entry, bool) or not isinstance(entry, (str, int)):
            raise InvalidConfiguration(
                f"Promotion '{promotion_id}' {field_name} entries must be strings, got {entry!r}"
            )
    return [str(entry) for entry in value]


def _today() -> date:
    return datetime.now(timezone.utc).date()


class Promotion:
    """
    A discount rule that applies to an order when its conditions match.

    Status, date range, order types and stores are checked first; if any of
    them rejects the order, conditions are not evaluated at all.

    The condition set itself is immutable. Changing the operator swaps in a
    new set under a lock, so a concurrent `applies` call always works on one
    consistent snapshot.
    """

    def __init__(
        self,
        promotion_id: str,
        name: str,
        conditions: Optional[List[Any]] = None,
        condition_operator: Union[str, ConditionOperator] = ConditionOperator.AND,
        status: bool = True,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        order_types: Optional[List[str]] = None,
        stores: Optional[List[str]] = None,
        offer: Optional[dict] = None,
        description: str = "",
    ):
        if not promotion_id:
            raise InvalidConfiguration("Promotion requires an id")
        if not name:
            raise InvalidConfiguration(f"Promotion '{promotion_id}' requires a name")

        self.promotion_id = promotion_id
        self.name = name
        self.description = description
        if not isinstance(status, bool):
            raise InvalidConfiguration(
                f"Promotion '{promotion_id}' status must be true or false, got {status!r}"
            )
        self.status = status
        self.start_date = _parse_date(start_date, "start_date")
        self.end_date = _parse_date(end_date, "end_date")
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise InvalidConfiguration(
                f"Promotion '{promotion_id}' ends ({self.end_date}) before it starts "
                f"({self.start_date})"
            )
        self.order_types = _string_list(order_types, "order_types", promotion_id)
        self.stores = _string_list(stores, "stores", promotion_id)
        self.offer = dict(offer or {})
        self._condition_set = ConditionSet.from_list(conditions, condition_operator)
        self._lock = Lock()

    @classmethod
    def from_dict(cls, data: dict) -> "Promotion":
        """Create from a JSON promotion definition."""
        if not isinstance(data, dict):
            raise InvalidConfiguration(
                f"Promotion definition must be a mapping, got {type(data).__name__}"
            )
        conditions = data.get("conditions") or []
        if not isinstance(conditions, list):
            raise InvalidConfiguration("Promotion 'conditions' must be a list")

        return cls(
            promotion_id=data.get("id", ""),
            name=data.get("name", ""),
            description=data.get("description", ""),
            conditions=conditions,
            condition_operator=data.get("condition_operator", "AND"),
            status=data.get("status", True),
            start_date=data.get("start_date"),
            end_date=data.get("end_date"),
            order_types=data.get("order_types", []),
            stores=data.get("stores", []),
            offer=data.get("offer"),
        )

    def to_dict(self) -> dict:
        condition_set = self.condition_set
        return {
            "id": self.promotion_id,
            "name": self.name,
            "description": self.description,
            "status": self.status,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "order_types": list(self.order_types),
            "stores": list(self.stores),
            "offer": dict(self.offer),
            "conditions": condition_set.to_list(),
            "condition_operator": condition_set.operator.value,
        }

    # ------------------------------------------------------------------
    # Condition set
    # ------------------------------------------------------------------

    @property
    def condition_set(self) -> ConditionSet:
        with self._lock:
            return self._condition_set

    @property
    def condition_operator(self) -> ConditionOperator:
        return self.condition_set.operator

    def set_condition_operator(self, operator: Union[str, ConditionOperator]) -> None:
        """Change how conditions are combined. Later `applies` calls see it."""
        operator = ConditionOperator.parse(operator)
        with self._lock:
            self._condition_set = self._condition_set.with_operator(operator)
        logger.info(f"Promotion {self.promotion_id} condition operator set to {operator.value}")

    # ------------------------------------------------------------------
    # Eligibility
    # ------------------------------------------------------------------

    def is_available(self, order: OrderLike, today: Optional[date] = None) -> bool:
        """Pre-filters: status, date range, order type and store."""
        if not self.status:
            return False

        today = today or _today()
        if self.start_date and today < self.start_date:
            return False
        if self.end_date and today > self.end_date:
            return False

        if self.order_types and getattr(order, "order_type", None) not in self.order_types:
            return False
        if self.stores:
            store_id = getattr(order, "store_id", None)
            if store_id is None or str(store_id) not in self.stores:
                return False

        return True

    def evaluate(self, order: OrderLike, today: Optional[date] = None) -> Optional[EvaluationResult]:
        """
        Per-condition results for the order.

        Returns None when a pre-filter rejects the order.
        """
        if not self.is_available(order, today):
            return None
        return self.condition_set.evaluate(order)

    def applies(self, order: OrderLike, today: Optional[date] = None) -> bool:
        if not self.is_available(order, today):
            logger.debug(f"Promotion {self.promotion_id} filtered out before conditions")
            return False
        return self.condition_set.applies(order)

    def __repr__(self) -> str:
        return f"Promotion(id={self.promotion_id!r}, name={self.name!r})"
