"""Repository interfaces for Order aggregate."""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from ..entities.order import Order


class DuplicateOrderError(ValueError):
    """An order with the same number is already stored."""


class OrderRepository(ABC):
    """Abstract repository for Order aggregate persistence."""

    @abstractmethod
    async def add(self, order: Order) -> None:
        """Insert a new order.

        Args:
            order: Freshly created order

        Raises:
            DuplicateOrderError: If an order with the same number already exists
        """
        pass

    @abstractmethod
    async def save(self, order: Order) -> None:
        """Persist changes to an existing order (last write wins).

        Args:
            order: Order aggregate to persist
        """
        pass

    @abstractmethod
    async def get(self, order_number: str) -> Optional[Order]:
        """Retrieve order by order number.

        Args:
            order_number: Human-readable order number

        Returns:
            Order if found, None otherwise
        """
        pass

    @abstractmethod
    async def delete(self, order_number: str) -> bool:
        """Delete an order. Only used to compensate a failed checkout.

        Returns:
            True if an order was deleted
        """
        pass

    @abstractmethod
    async def find_for_customer(
        self,
        user_ids: Iterable[str] = (),
        emails: Iterable[str] = (),
        phones: Iterable[str] = (),
    ) -> List[Order]:
        """Find orders owned by any of the accounts or shipped to any of the contacts.

        Args:
            user_ids: Registered account ids
            emails: Shipping emails (compared case-insensitively)
            phones: Shipping phone variants

        Returns:
            Matching orders (may contain an order once per matching criterion)
        """
        pass
