"""Global test fixtures for the test suite."""

import sys
from pathlib import Path

# Add the project root to the path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
import pytest_asyncio
from decimal import Decimal
from httpx import AsyncClient, ASGITransport

from promotions.config import DEFAULT_PROMOTIONS_DIR
from promotions.core.amount import Amount
from promotions.core.order import Order, OrderItem
from promotions.core.promotion_registry import (
    initialize_promotion_registry,
    reset_promotion_registry,
)


def usd(number) -> Amount:
    """Shorthand for a USD amount."""
    return Amount(Decimal(str(number)), "USD")


# ============= Order Fixtures =============

@pytest.fixture
def order() -> Order:
    """An empty default-type order placed in the main store."""
    return Order(order_type="default", store_id="main", currency_code="USD")


@pytest.fixture
def order_item() -> OrderItem:
    """Three units at $10.00."""
    return OrderItem(quantity=3, unit_price=usd("10.00"))


# ============= Promotion Fixtures =============

@pytest.fixture
def total_conditions() -> list:
    """Matches orders under $20 or over $100."""
    return [
        {
            "plugin": "order_total_price",
            "configuration": {
                "operator": "<",
                "amount": {"number": "20.00", "currency_code": "USD"},
            },
        },
        {
            "plugin": "order_total_price",
            "configuration": {
                "operator": ">",
                "amount": {"number": "100.00", "currency_code": "USD"},
            },
        },
    ]


@pytest.fixture
def mixed_conditions() -> list:
    """Order total over $30 and any item with quantity over 1."""
    return [
        {
            "plugin": "order_total_price",
            "configuration": {
                "operator": ">",
                "amount": {"number": "30.00", "currency_code": "USD"},
            },
        },
        {
            "plugin": "order_item_quantity",
            "configuration": {"operator": ">", "quantity": 1},
        },
    ]


@pytest.fixture
def initialized_registry():
    """Initialize the promotion registry with the packaged definitions."""
    reset_promotion_registry()
    registry = initialize_promotion_registry(DEFAULT_PROMOTIONS_DIR)
    yield registry
    reset_promotion_registry()


# ============= FastAPI Test Client =============

@pytest_asyncio.fixture
async def test_client(initialized_registry):
    """Create an async test client backed by the packaged promotions."""
    from promotions.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
