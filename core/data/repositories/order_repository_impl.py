"""SQLAlchemy implementation of OrderRepository."""

import logging
from typing import Iterable, List, Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.domain.entities.order import Order
from core.domain.repositories.order_repository import DuplicateOrderError, OrderRepository

from ..mappers import OrderMapper
from ..models.order_model import OrderModel

logger = logging.getLogger(__name__)


class SqlAlchemyOrderRepository(OrderRepository):
    """
    Concrete implementation of OrderRepository using SQLAlchemy.

    Every call runs in its own session and commits before returning
    (document-level last write wins).
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize repository with a session factory.

        Args:
            session_factory: SQLAlchemy async session factory
        """
        self._session_factory = session_factory

    async def add(self, order: Order) -> None:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    existing = await session.get(OrderModel, order.number)
                    if existing is not None:
                        raise DuplicateOrderError(f"Order {order.number} already exists")
                    session.add(OrderMapper.to_persistence(order))
        except IntegrityError as e:
            raise DuplicateOrderError(f"Order {order.number} already exists") from e
        logger.debug(f"Order inserted: {order.number}")

    async def save(self, order: Order) -> None:
        """Persist order aggregate (upsert).

        Args:
            order: Order domain aggregate
        """
        async with self._session_factory() as session:
            async with session.begin():
                existing = await session.get(OrderModel, order.number)
                if existing:
                    OrderMapper.update_persistence(order, existing)
                else:
                    session.add(OrderMapper.to_persistence(order))

    async def get(self, order_number: str) -> Optional[Order]:
        """Retrieve order by order number.

        Args:
            order_number: Order number

        Returns:
            Order if found, None otherwise
        """
        async with self._session_factory() as session:
            model = await session.get(OrderModel, order_number)
            return OrderMapper.to_domain(model) if model else None

    async def delete(self, order_number: str) -> bool:
        async with self._session_factory() as session:
            async with session.begin():
                model = await session.get(OrderModel, order_number)
                if model is None:
                    return False
                await session.delete(model)
        logger.info(f"🗑️ Order deleted: {order_number}")
        return True

    async def find_for_customer(
        self,
        user_ids: Iterable[str] = (),
        emails: Iterable[str] = (),
        phones: Iterable[str] = (),
    ) -> List[Order]:
        user_ids = [value for value in user_ids if value]
        emails = [value.strip().lower() for value in emails if value and value.strip()]
        phones = [value for value in phones if value]

        clauses = []
        if user_ids:
            clauses.append(OrderModel.user_id.in_(user_ids))
        if emails:
            clauses.append(OrderModel.customer_email.in_(emails))
        if phones:
            clauses.append(OrderModel.customer_phone.in_(phones))
        if not clauses:
            return []

        async with self._session_factory() as session:
            result = await session.execute(select(OrderModel).where(or_(*clauses)))
            return [OrderMapper.to_domain(model) for model in result.scalars().all()]
