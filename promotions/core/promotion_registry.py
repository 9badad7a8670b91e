"""In-memory registry of promotions loaded from JSON definitions."""

import logging
from datetime import date
from pathlib import Path
from threading import Lock
from typing import Dict, List, Optional, Union

from promotions.config import get_settings
from promotions.core.config_loader import load_all_promotion_configs
from promotions.core.errors import PromotionError
from promotions.core.order import OrderLike
from promotions.core.promotion import Promotion

logger = logging.getLogger(__name__)


class PromotionRegistryError(Exception):
    """Raised when registry initialization or validation fails."""
    pass


class PromotionRegistry:
    """
    Holds every configured promotion keyed by id.

    Definitions are validated on load; any invalid or duplicate definition
    fails the whole initialization.
    """

    def __init__(self, promotions_dir: Optional[Union[str, Path]] = None):
        self._promotions_dir = Path(promotions_dir) if promotions_dir else None
        self._promotions: Dict[str, Promotion] = {}
        self._initialized = False
        self._lock = Lock()

    @property
    def promotions_dir(self) -> Path:
        return self._promotions_dir or get_settings().promotions_dir

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def initialize(self) -> None:
        """Load all promotion definitions, build promotions, validate."""
        with self._lock:
            promotions: Dict[str, Promotion] = {}
            errors: List[str] = []

            for data in load_all_promotion_configs(self.promotions_dir):
                promotion_id = data.get("id") or "<missing id>"
                try:
                    promotion = Promotion.from_dict(data)
                except PromotionError as e:
                    errors.append(f"Promotion '{promotion_id}': {e}")
                    continue
                if promotion.promotion_id in promotions:
                    errors.append(f"Duplicate promotion id: {promotion.promotion_id}")
                    continue
                promotions[promotion.promotion_id] = promotion

            if errors:
                for error in errors:
                    logger.error(f"Promotion validation error: {error}")
                raise PromotionRegistryError(
                    f"Promotion validation failed with {len(errors)} error(s). First: {errors[0]}"
                )

            self._promotions = promotions
            self._initialized = True
            logger.info(
                f"PromotionRegistry initialized: {len(promotions)} promotions "
                f"from {self.promotions_dir}"
            )

    def reload(self) -> None:
        """Re-read definitions from disk. Operator changes made at runtime are lost."""
        self.initialize()

    def register(self, promotion: Promotion) -> None:
        """Add a promotion built in code."""
        with self._lock:
            if promotion.promotion_id in self._promotions:
                raise PromotionRegistryError(
                    f"Duplicate promotion id: {promotion.promotion_id}"
                )
            self._promotions[promotion.promotion_id] = promotion

    def get_promotion(self, promotion_id: str) -> Optional[Promotion]:
        return self._promotions.get(promotion_id)

    def list_promotions(self) -> List[Promotion]:
        return [self._promotions[pid] for pid in sorted(self._promotions)]

    def applicable_promotions(
        self, order: OrderLike, today: Optional[date] = None
    ) -> List[Promotion]:
        """All promotions that apply to the order, in id order."""
        return [p for p in self.list_promotions() if p.applies(order, today)]


# Global singleton
_promotion_registry: Optional[PromotionRegistry] = None


def get_promotion_registry() -> PromotionRegistry:
    """Get the registry, initializing it on first use."""
    global _promotion_registry
    if _promotion_registry is None:
        _promotion_registry = PromotionRegistry()
        _promotion_registry.initialize()
    return _promotion_registry


def initialize_promotion_registry(
    promotions_dir: Optional[Union[str, Path]] = None,
) -> PromotionRegistry:
    """Force (re)initialize the registry. Called at startup."""
    global _promotion_registry
    registry = PromotionRegistry(promotions_dir)
    registry.initialize()
    _promotion_registry = registry
    return _promotion_registry


def reset_promotion_registry() -> None:
    """Reset the registry (for testing)."""
    global _promotion_registry
    _promotion_registry = None
