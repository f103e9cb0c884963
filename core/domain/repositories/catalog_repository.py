"""Read-only catalog lookups needed during settlement."""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from ..entities.catalog import Category, CustomerAccount, Product, Vendor


class CatalogRepository(ABC):
    """Abstract access to products, vendors, categories and customer accounts."""

    @abstractmethod
    async def get_product(self, product_id: str) -> Optional[Product]:
        pass

    @abstractmethod
    async def get_vendor(self, vendor_id: str) -> Optional[Vendor]:
        pass

    @abstractmethod
    async def get_category(self, category_id: str) -> Optional[Category]:
        pass

    @abstractmethod
    async def find_customers(
        self,
        user_id: Optional[str] = None,
        email: Optional[str] = None,
        phones: Iterable[str] = (),
    ) -> List[CustomerAccount]:
        """Find accounts matching the id, the email (case-insensitive) or any phone variant.

        Returns:
            Matching accounts, each at most once
        """
        pass
