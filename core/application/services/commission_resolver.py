"""Commission resolution for order lines."""
import logging
from decimal import Decimal
from typing import Optional

from core.application.interfaces import IMarketplaceConfigProvider
from core.domain.entities import Category, Product, Vendor
from core.domain.services import build_commission_snapshot, pick_commission_source
from core.domain.value_objects import CommissionRule, CommissionSnapshot

logger = logging.getLogger(__name__)


class CommissionResolver:
    """
    Picks and evaluates the commission rule for a line item.

    The global default comes from the injected config provider; callers load
    it once per batch with ``load_global_rule`` and pass it to ``resolve``.
    """

    def __init__(self, config_provider: IMarketplaceConfigProvider) -> None:
        self._config_provider = config_provider

    async def load_global_rule(self) -> CommissionRule:
        rule = await self._config_provider.get_global_commission()
        logger.debug(f"Global commission: {rule.type.value} {rule.value}% + {rule.fixed_amount}")
        return rule

    def resolve(
        self,
        item_total: Decimal,
        product: Product,
        category: Optional[Category],
        vendor: Optional[Vendor],
        global_rule: Optional[CommissionRule],
    ) -> CommissionSnapshot:
        """
        Compute the commission snapshot for one line.

        Args:
            item_total: Line total (unit price x quantity)
            product: Purchased product
            category: Product category, if any
            vendor: Selling vendor, if any
            global_rule: Marketplace default loaded for this batch

        Returns:
            Frozen CommissionSnapshot
        """
        source, rule = pick_commission_source(
            product.commission,
            category.commission if category else None,
            vendor.commission if vendor else None,
            global_rule,
        )
        return build_commission_snapshot(item_total, source, rule)
