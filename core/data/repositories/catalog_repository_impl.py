"""SQLAlchemy implementations of CatalogRepository and StockRepository."""

import logging
from typing import Iterable, List, Optional

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.domain.entities import Category, CustomerAccount, Product, Vendor
from core.domain.repositories import CatalogRepository, StockRepository
from core.domain.value_objects import phone_variants

from ..mappers import CatalogMapper
from ..models.catalog_model import (
    CategoryModel,
    CustomerModel,
    ProductModel,
    ProductVariationModel,
    VendorModel,
)

logger = logging.getLogger(__name__)


class SqlAlchemyCatalogRepository(CatalogRepository):
    """Read access to catalog rows, plus seeding helpers."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_product(self, product_id: str) -> Optional[Product]:
        async with self._session_factory() as session:
            model = await session.get(ProductModel, str(product_id))
            return CatalogMapper.product_to_domain(model) if model else None

    async def get_vendor(self, vendor_id: str) -> Optional[Vendor]:
        async with self._session_factory() as session:
            model = await session.get(VendorModel, str(vendor_id))
            return CatalogMapper.vendor_to_domain(model) if model else None

    async def get_category(self, category_id: str) -> Optional[Category]:
        async with self._session_factory() as session:
            model = await session.get(CategoryModel, str(category_id))
            return CatalogMapper.category_to_domain(model) if model else None

    async def find_customers(
        self,
        user_id: Optional[str] = None,
        email: Optional[str] = None,
        phones: Iterable[str] = (),
    ) -> List[CustomerAccount]:
        variants = set()
        for phone in phones:
            variants.update(phone_variants(phone))

        clauses = []
        if user_id:
            clauses.append(CustomerModel.id == user_id)
        if email and email.strip():
            clauses.append(func.lower(CustomerModel.email) == email.strip().lower())
        if variants:
            clauses.append(CustomerModel.phone.in_(sorted(variants)))
        if not clauses:
            return []

        async with self._session_factory() as session:
            result = await session.execute(select(CustomerModel).where(or_(*clauses)))
            return [CatalogMapper.customer_to_domain(model) for model in result.scalars().all()]

    async def add_product(self, product: Product) -> None:
        async with self._session_factory() as session:
            async with session.begin():
                session.add(CatalogMapper.product_to_persistence(product))

    async def add_vendor(self, vendor: Vendor) -> None:
        async with self._session_factory() as session:
            async with session.begin():
                session.add(CatalogMapper.vendor_to_persistence(vendor))

    async def add_category(self, category: Category) -> None:
        async with self._session_factory() as session:
            async with session.begin():
                session.add(CatalogMapper.category_to_persistence(category))

    async def add_customer(self, customer: CustomerAccount) -> None:
        async with self._session_factory() as session:
            async with session.begin():
                session.add(CatalogMapper.customer_to_persistence(customer))


class SqlAlchemyStockRepository(StockRepository):
    """
    Stock counters updated with single conditional UPDATE statements.

    ``try_decrement`` relies on the database applying
    ``SET stock = stock - q WHERE stock >= q`` atomically per row.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def try_decrement(
        self, product_id: str, quantity: int, variation_id: Optional[str] = None
    ) -> bool:
        if quantity <= 0:
            return False
        model, conditions = self._target(product_id, variation_id)
        statement = (
            update(model)
            .where(*conditions, model.stock >= quantity)
            .values(stock=model.stock - quantity)
            .execution_options(synchronize_session=False)
        )
        async with self._session_factory() as session:
            async with session.begin():
                result = await session.execute(statement)
        return result.rowcount == 1

    async def increment(
        self, product_id: str, quantity: int, variation_id: Optional[str] = None
    ) -> None:
        model, conditions = self._target(product_id, variation_id)
        statement = (
            update(model)
            .where(*conditions)
            .values(stock=model.stock + quantity)
            .execution_options(synchronize_session=False)
        )
        async with self._session_factory() as session:
            async with session.begin():
                result = await session.execute(statement)
        if result.rowcount != 1:
            logger.warning(f"Stock increment matched no row for product {product_id} / {variation_id}")

    @staticmethod
    def _target(product_id: str, variation_id: Optional[str]):
        if variation_id:
            return ProductVariationModel, (
                ProductVariationModel.id == str(variation_id),
                ProductVariationModel.product_id == str(product_id),
            )
        return ProductModel, (ProductModel.id == str(product_id),)
