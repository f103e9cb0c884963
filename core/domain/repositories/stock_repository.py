"""Stock counter primitives."""

from abc import ABC, abstractmethod
from typing import Optional


class StockRepository(ABC):
    """
    Atomic stock counters.

    Implementations must make ``try_decrement`` a single compare-and-decrement
    so concurrent reservations cannot oversell.
    """

    @abstractmethod
    async def try_decrement(
        self, product_id: str, quantity: int, variation_id: Optional[str] = None
    ) -> bool:
        """Decrement stock only if at least ``quantity`` is available.

        Args:
            product_id: Product whose stock is reserved
            quantity: Units to reserve
            variation_id: Variation whose stock is reserved instead, if any

        Returns:
            True if the decrement happened
        """
        pass

    @abstractmethod
    async def increment(
        self, product_id: str, quantity: int, variation_id: Optional[str] = None
    ) -> None:
        """Give ``quantity`` units back unconditionally."""
        pass
