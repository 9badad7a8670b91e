"""Amount value object and the comparison operators used by numeric conditions."""

from __future__ import annotations

import operator
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Callable, Union

from promotions.core.errors import InvalidConfiguration, UnitMismatch


class ComparisonOperator(Enum):
    """Operators a numeric condition can be configured with."""
    LT = "<"
    LTE = "<="
    GT = ">"
    GTE = ">="
    EQ = "=="

    @classmethod
    def parse(cls, value: Union[str, "ComparisonOperator"]) -> "ComparisonOperator":
        """Resolve an operator symbol, raising InvalidConfiguration if unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip())
        except ValueError:
            allowed = ", ".join(op.value for op in cls)
            raise InvalidConfiguration(
                f"Unknown operator {value!r}, expected one of: {allowed}"
            ) from None

    def apply(self, left: Any, right: Any) -> bool:
        return _OPERATOR_FUNCS[self](left, right)


_OPERATOR_FUNCS: dict[ComparisonOperator, Callable[[Any, Any], bool]] = {
    ComparisonOperator.LT: operator.lt,
    ComparisonOperator.LTE: operator.le,
    ComparisonOperator.GT: operator.gt,
    ComparisonOperator.GTE: operator.ge,
    ComparisonOperator.EQ: operator.eq,
}


def to_decimal(value: Any) -> Decimal:
    """Parse a number into a finite Decimal, raising InvalidConfiguration otherwise."""
    if isinstance(value, bool):
        raise InvalidConfiguration(f"Malformed number: {value!r}")
    if isinstance(value, float):
        # Go through str so 0.1 stays 0.1 and not its binary expansion
        value = str(value)
    try:
        number = Decimal(value) if not isinstance(value, Decimal) else value
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidConfiguration(f"Malformed number: {value!r}") from None
    if not number.is_finite():
        raise InvalidConfiguration(f"Malformed number: {value!r}")
    return number


@dataclass(frozen=True, eq=False)
class Amount:
    """
    A decimal quantity tagged with a unit (usually a currency code).

    Equality and ordering comparisons only work between amounts that share
    a unit; anything else raises UnitMismatch. Comparing with a non-Amount
    falls back to Python's default (== is False).
    """
    quantity: Decimal
    unit: str

    def __post_init__(self):
        object.__setattr__(self, "quantity", to_decimal(self.quantity))
        if not isinstance(self.unit, str) or not self.unit.strip():
            raise InvalidConfiguration(f"Amount unit must be a non-empty string, got {self.unit!r}")
        object.__setattr__(self, "unit", self.unit.strip().upper())

    @classmethod
    def from_dict(cls, data: Any) -> "Amount":
        """Create from the price shape {"number": "20.00", "currency_code": "USD"}."""
        if isinstance(data, Amount):
            return data
        if not isinstance(data, dict):
            raise InvalidConfiguration(f"Amount must be a mapping, got {type(data).__name__}")
        if "number" not in data or "currency_code" not in data:
            raise InvalidConfiguration("Amount requires 'number' and 'currency_code'")
        return cls(quantity=data["number"], unit=data["currency_code"])

    def to_dict(self) -> dict:
        return {"number": str(self.quantity), "currency_code": self.unit}

    def _check_unit(self, other: "Amount") -> None:
        if self.unit != other.unit:
            raise UnitMismatch(self.unit, other.unit)

    def __add__(self, other: "Amount") -> "Amount":
        if not isinstance(other, Amount):
            return NotImplemented
        self._check_unit(other)
        return Amount(self.quantity + other.quantity, self.unit)

    def __mul__(self, factor: int) -> "Amount":
        if isinstance(factor, bool) or not isinstance(factor, (int, Decimal)):
            return NotImplemented
        return Amount(self.quantity * factor, self.unit)

    __rmul__ = __mul__

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Amount):
            return NotImplemented
        return compare(self, ComparisonOperator.EQ, other)

    def __hash__(self) -> int:
        # Decimal("20") and Decimal("20.00") hash alike, matching __eq__
        return hash((self.quantity, self.unit))

    def __lt__(self, other: "Amount") -> bool:
        return compare(self, ComparisonOperator.LT, other)

    def __le__(self, other: "Amount") -> bool:
        return compare(self, ComparisonOperator.LTE, other)

    def __gt__(self, other: "Amount") -> bool:
        return compare(self, ComparisonOperator.GT, other)

    def __ge__(self, other: "Amount") -> bool:
        return compare(self, ComparisonOperator.GTE, other)

    def __str__(self) -> str:
        return f"{self.quantity} {self.unit}"


def compare(left: Amount, op: Union[str, ComparisonOperator], right: Amount) -> bool:
    """Compare two amounts of the same unit. Raises UnitMismatch otherwise."""
    if not isinstance(left, Amount) or not isinstance(right, Amount):
        raise TypeError(
            f"compare() expects two Amounts, got {type(left).__name__} "
            f"and {type(right).__name__}"
        )
    if left.unit != right.unit:
        raise UnitMismatch(left.unit, right.unit)
    return ComparisonOperator.parse(op).apply(left.quantity, right.quantity)
