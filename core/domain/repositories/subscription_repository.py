"""Repository interfaces for Subscription aggregate."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from ..entities.subscription import Subscription


class SubscriptionRepository(ABC):
    """Abstract repository for Subscription persistence."""

    @abstractmethod
    async def save(self, subscription: Subscription) -> None:
        """Insert or update a subscription.

        Raises:
            ValueError: If another subscription already uses the same source item key
        """
        pass

    @abstractmethod
    async def get(self, subscription_id: str) -> Optional[Subscription]:
        pass

    @abstractmethod
    async def exists_for_source_item(self, source_item_key: str) -> bool:
        pass

    @abstractmethod
    async def find_due(self, now: datetime, limit: int) -> List[Subscription]:
        """Active subscriptions with ``next_billing_at <= now``, oldest due first.

        Args:
            now: Reference time
            limit: Maximum number of subscriptions to return

        Returns:
            Due subscriptions
        """
        pass
