"""
Inventory Ledger.

Reserves stock for order lines with compensating rollback, and restores it
exactly once per order.
"""
import logging
from datetime import datetime
from typing import Iterable, List, Optional

from core.domain.clock import utc_now
from core.domain.entities import InventoryAdjustment, Order, OrderItem
from core.domain.repositories import CatalogRepository, StockRepository
from core.domain.result import ErrorKind, Outcome

logger = logging.getLogger(__name__)

RESERVE = -1
RESTORE = 1


class InventoryLedger:
    """
    Stock reservations backed by a compare-and-decrement primitive.

    There is no application-level lock: correctness against overselling rests
    on ``StockRepository.try_decrement`` being atomic at the storage layer.
    """

    def __init__(self, catalog: CatalogRepository, stock: StockRepository) -> None:
        self._catalog = catalog
        self._stock = stock

    async def apply_adjustment(
        self, items: Iterable[OrderItem], direction: int
    ) -> Outcome[List[InventoryAdjustment]]:
        """
        Apply a stock adjustment for order lines.

        Args:
            items: Order lines
            direction: RESERVE (-1) or RESTORE (+1)

        Returns:
            Outcome with the adjustments performed
        """
        if direction == RESERVE:
            return await self.reserve(items)
        if direction == RESTORE:
            adjustments = await self._adjustments_for(items)
            await self.release(adjustments)
            return Outcome.success(adjustments)
        return Outcome.failure(ErrorKind.VALIDATION, f"Invalid inventory direction: {direction}")

    async def reserve(self, items: Iterable[OrderItem]) -> Outcome[List[InventoryAdjustment]]:
        """
        Reserve stock for every line, all or nothing.

        Backorder products are not deducted (``applied=False``). If any line
        fails, lines already applied in this batch are rolled back in
        last-applied-first order.
        """
        adjustments: List[InventoryAdjustment] = []
        try:
            outcome = await self._reserve_all(items, adjustments)
        except Exception:
            await self.rollback(adjustments)
            raise

        if not outcome.ok:
            await self.rollback(adjustments)
        return outcome

    async def _reserve_all(
        self, items: Iterable[OrderItem], adjustments: List[InventoryAdjustment]
    ) -> Outcome[List[InventoryAdjustment]]:
        for item in items:
            product = await self._catalog.get_product(item.product_id)
            if product is None:
                return Outcome.failure(
                    ErrorKind.NOT_FOUND, f"Product {item.product_id} not found"
                )

            if product.allow_backorder:
                adjustments.append(
                    InventoryAdjustment(
                        product_id=item.product_id,
                        quantity=item.quantity,
                        variation_id=item.variation_id,
                        applied=False,
                    )
                )
                continue

            reserved = await self._stock.try_decrement(
                item.product_id, item.quantity, variation_id=item.variation_id
            )
            if not reserved:
                return Outcome.failure(
                    ErrorKind.CONFLICT,
                    f"Insufficient stock for {product.title or item.product_id}",
                    product_id=item.product_id,
                    variation_id=item.variation_id,
                )

            adjustments.append(
                InventoryAdjustment(
                    product_id=item.product_id,
                    quantity=item.quantity,
                    variation_id=item.variation_id,
                )
            )

        return Outcome.success(adjustments)

    async def rollback(self, adjustments: List[InventoryAdjustment]) -> None:
        """Reverse applied adjustments, last applied first."""
        applied = [adjustment for adjustment in adjustments if adjustment.applied]
        if applied:
            logger.warning(f"Rolling back {len(applied)} inventory adjustment(s)")
        await self.release(reversed(applied))

    async def release(self, adjustments: Iterable[InventoryAdjustment]) -> None:
        """Give stock back for every applied adjustment, unconditionally."""
        for adjustment in adjustments:
            if not adjustment.applied:
                continue
            await self._stock.increment(
                adjustment.product_id,
                adjustment.quantity,
                variation_id=adjustment.variation_id,
            )

    async def restore_for_order(
        self, order: Order, reason: str, at: Optional[datetime] = None
    ) -> bool:
        """
        Restore an order's reserved stock exactly once.

        Args:
            order: Order whose inventory state is consulted and updated
            reason: Recorded as ``restored_reason``
            at: Restoration time (defaults to now)

        Returns:
            True if stock was given back by this call
        """
        state = order.inventory
        if not state.needs_restore:
            logger.debug(f"Inventory restore skipped for {order.number} (deducted={state.deducted}, restored={state.restored})")
            return False

        adjustments = state.adjustments or await self._adjustments_for(order.items)
        await self.release(adjustments)
        state.mark_restored(reason, at or utc_now())
        logger.info(f"✅ Inventory restored for {order.number}: {reason}")
        return True

    async def _adjustments_for(self, items: Iterable[OrderItem]) -> List[InventoryAdjustment]:
        adjustments = []
        for item in items:
            product = await self._catalog.get_product(item.product_id)
            adjustments.append(
                InventoryAdjustment(
                    product_id=item.product_id,
                    quantity=item.quantity,
                    variation_id=item.variation_id,
                    applied=product is not None and not product.allow_backorder,
                )
            )
        return adjustments
