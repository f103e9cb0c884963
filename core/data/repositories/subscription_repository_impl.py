"""SQLAlchemy implementation of SubscriptionRepository."""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.domain.entities.subscription import Subscription
from core.domain.enums import SubscriptionStatus
from core.domain.repositories.subscription_repository import SubscriptionRepository

from ..mappers import SubscriptionMapper, to_db_datetime
from ..models.subscription_model import SubscriptionModel


class SqlAlchemySubscriptionRepository(SubscriptionRepository):
    """Concrete implementation of SubscriptionRepository using SQLAlchemy."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def save(self, subscription: Subscription) -> None:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    clash = await session.execute(
                        select(SubscriptionModel.id).where(
                            SubscriptionModel.source_item_key == subscription.source_item_key,
                            SubscriptionModel.id != subscription.id,
                        )
                    )
                    if clash.scalar_one_or_none() is not None:
                        raise ValueError(
                            f"Subscription for {subscription.source_item_key} already exists"
                        )

                    model = await session.get(SubscriptionModel, subscription.id)
                    if model is None:
                        model = SubscriptionModel(id=subscription.id)
                        session.add(model)
                    SubscriptionMapper.update_persistence(subscription, model)
        except IntegrityError as e:
            raise ValueError(f"Subscription {subscription.subscription_number} conflicts: {e}") from e

    async def get(self, subscription_id: str) -> Optional[Subscription]:
        async with self._session_factory() as session:
            model = await session.get(SubscriptionModel, subscription_id)
            return SubscriptionMapper.to_domain(model) if model else None

    async def exists_for_source_item(self, source_item_key: str) -> bool:
        async with self._session_factory() as session:
            result = await session.execute(
                select(SubscriptionModel.id).where(SubscriptionModel.source_item_key == source_item_key)
            )
            return result.scalar_one_or_none() is not None

    async def find_due(self, now: datetime, limit: int) -> List[Subscription]:
        """Active subscriptions due at ``now``, oldest due first.

        Args:
            now: Reference time
            limit: Batch size

        Returns:
            Due subscriptions
        """
        async with self._session_factory() as session:
            result = await session.execute(
                select(SubscriptionModel)
                .where(
                    SubscriptionModel.status == SubscriptionStatus.ACTIVE.value,
                    SubscriptionModel.next_billing_at.is_not(None),
                    SubscriptionModel.next_billing_at <= to_db_datetime(now),
                )
                .order_by(SubscriptionModel.next_billing_at)
                .limit(max(0, limit))
            )
            return [SubscriptionMapper.to_domain(model) for model in result.scalars().all()]
