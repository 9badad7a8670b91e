"""Exceptions raised while building and evaluating promotion conditions."""


class PromotionError(Exception):
    """Base class for promotion errors."""
    pass


class InvalidConfiguration(PromotionError, ValueError):
    """
    Raised when a condition or promotion is built from out-of-domain settings.

    Unknown operator symbols, negative thresholds and malformed amounts all
    end up here. Raised at construction time only.
    """
    pass


class UnitMismatch(PromotionError, TypeError):
    """Raised when two amounts with different units are compared."""

    def __init__(self, left_unit: str, right_unit: str):
        self.left_unit = left_unit
        self.right_unit = right_unit
        super().__init__(
            f"Cannot compare amounts in different units: {left_unit} vs {right_unit}"
        )
