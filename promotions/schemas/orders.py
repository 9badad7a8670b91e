"""Pydantic schemas for orders submitted for promotion evaluation."""

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from promotions.core.amount import Amount
from promotions.core.order import Order, OrderItem


class PriceSchema(BaseModel):
    """Price in the {number, currency_code} shape."""

    number: Decimal = Field(..., description="Decimal amount, e.g. '10.00'")
    currency_code: str = Field(..., min_length=3, max_length=3, description="ISO 4217 code")

    def to_amount(self) -> Amount:
        return Amount(self.number, self.currency_code)


class OrderItemSchema(BaseModel):
    """A line item in an order payload."""

    quantity: int = Field(..., ge=0, description="Units purchased")
    unit_price: PriceSchema
    title: str = ""


class OrderSchema(BaseModel):
    """Order payload evaluated against promotions."""

    order_type: str = "default"
    store_id: Optional[str] = None
    currency_code: str = Field("USD", min_length=3, max_length=3)
    items: List[OrderItemSchema] = Field(default_factory=list)

    def to_order(self) -> Order:
        return Order(
            order_type=self.order_type,
            store_id=self.store_id,
            currency_code=self.currency_code,
            items=[
                OrderItem(
                    quantity=item.quantity,
                    unit_price=item.unit_price.to_amount(),
                    title=item.title,
                )
                for item in self.items
            ],
        )
