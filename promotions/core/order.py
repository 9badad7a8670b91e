"""Order abstractions consumed by the condition engine.

The engine only reads orders through the `OrderLike` / `LineItemLike`
protocols. `Order` and `OrderItem` are simple in-memory implementations used
by the HTTP layer and the tests.
"""

from __future__ import annotations

from typing import List, Optional, Protocol, Sequence, runtime_checkable

from promotions.core.amount import Amount
from promotions.core.errors import InvalidConfiguration


@runtime_checkable
class LineItemLike(Protocol):
    """A single order line as seen by item-scoped conditions."""

    def quantity(self) -> int: ...

    def unit_price(self) -> Amount: ...

    def subtotal(self) -> Amount: ...


@runtime_checkable
class OrderLike(Protocol):
    """An order as seen by order-scoped conditions."""

    def total(self) -> Amount: ...

    def items(self) -> Sequence[LineItemLike]: ...


def _validate_quantity(quantity: int) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidConfiguration(f"Quantity must be an integer, got {quantity!r}")
    if quantity < 0:
        raise InvalidConfiguration(f"Quantity must not be negative, got {quantity}")
    return quantity


class OrderItem:
    """Line item with a quantity and a unit price."""

    def __init__(self, quantity: int, unit_price: Amount, title: str = ""):
        self._quantity = _validate_quantity(quantity)
        self._unit_price = Amount.from_dict(unit_price)
        self.title = title

    def quantity(self) -> int:
        return self._quantity

    def unit_price(self) -> Amount:
        return self._unit_price

    def subtotal(self) -> Amount:
        return self._unit_price * self._quantity

    def set_quantity(self, quantity: int) -> None:
        self._quantity = _validate_quantity(quantity)

    def set_unit_price(self, unit_price: Amount) -> None:
        self._unit_price = Amount.from_dict(unit_price)

    def __repr__(self) -> str:
        return f"OrderItem(quantity={self._quantity}, unit_price={self._unit_price})"


class Order:
    """
    In-memory order.

    Attributes:
        order_type: Bundle/type of the order, matched by promotion pre-filters
        store_id: Store the order was placed in
        currency_code: Currency of the order total when it has no items
    """

    def __init__(
        self,
        order_type: str = "default",
        store_id: Optional[str] = None,
        currency_code: str = "USD",
        items: Optional[List[OrderItem]] = None,
    ):
        self.order_type = order_type
        self.store_id = store_id
        self.currency_code = currency_code.upper()
        self._items: List[LineItemLike] = list(items or [])

    def items(self) -> Sequence[LineItemLike]:
        return tuple(self._items)

    def add_item(self, item: LineItemLike) -> None:
        self._items.append(item)

    def remove_item(self, item: LineItemLike) -> None:
        self._items.remove(item)

    def total(self) -> Amount:
        """Sum of the line subtotals. Raises UnitMismatch on mixed currencies."""
        total = Amount(0, self.currency_code)
        for item in self._items:
            total = total + item.subtotal()
        return total

    def __repr__(self) -> str:
        return (
            f"Order(order_type={self.order_type!r}, store_id={self.store_id!r}, "
            f"items={len(self._items)})"
        )
