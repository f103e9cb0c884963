"""
Order Status State Machine.

Governs lifecycle transitions and their side effects:
- payment status flips (completed on progress, failed on cancel/return)
- one-time inventory restoration on cancel/return
- local consignment when an order ships without one
- a timeline entry for every update, including note-only ones
"""
import logging
from dataclasses import dataclass
from typing import Optional, Union

from core.application.interfaces import ICourierGateway
from core.domain.clock import utc_now
from core.domain.entities import Order
from core.domain.enums import OrderStatus
from core.domain.events import OrderStatusChangedEvent
from core.domain.result import ErrorKind, Outcome
from core.domain.services import allowed_next, can_transition, payment_status_after
from core.domain.services.order_status import RELEASING_STATUSES

from .consignments import apply_consignment
from .inventory_ledger import InventoryLedger

logger = logging.getLogger(__name__)


@dataclass
class TransitionResult:
    """What a status update did to the order."""

    order: Order
    previous_status: OrderStatus
    changed: bool
    inventory_restored: bool = False
    consignment_generated: bool = False


def parse_status(value: Union[str, OrderStatus, None]) -> Optional[OrderStatus]:
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus(str(value or "").strip().lower())
    except ValueError:
        return None


class OrderStatusMachine:
    """Applies status transitions to an in-memory order. Persistence is up to the caller."""

    def __init__(self, inventory_ledger: InventoryLedger, courier: ICourierGateway) -> None:
        self._inventory_ledger = inventory_ledger
        self._courier = courier

    async def transition(
        self,
        order: Order,
        target: Union[str, OrderStatus],
        actor: str,
        actor_role: str,
        note: str = "",
    ) -> Outcome[TransitionResult]:
        """
        Move an order to ``target``.

        Args:
            order: Order to update (mutated on success only)
            target: Requested status
            actor: Who requested the change
            actor_role: Role of the actor (admin, vendor, customer, system)
            note: Free-text note for the timeline

        Returns:
            Outcome with TransitionResult. A disallowed transition fails with
            CONFLICT and ``details["allowed_next"]``; the order is untouched.
        """
        current = order.order_status
        new_status = parse_status(target)
        if new_status is None:
            return Outcome.failure(
                ErrorKind.VALIDATION,
                f"Invalid order status: {target}",
                allowed_next=[status.value for status in allowed_next(current)],
            )

        if not can_transition(current, new_status):
            next_states = [status.value for status in allowed_next(current)]
            logger.info(
                f"Rejected transition {current.value} -> {new_status.value} for {order.number}"
            )
            return Outcome.failure(
                ErrorKind.CONFLICT,
                f"Cannot change order status from {current.value} to {new_status.value}",
                allowed_next=next_states,
            )

        now = utc_now()
        result = TransitionResult(order=order, previous_status=current, changed=new_status != current)

        if not result.changed:
            order.record_timeline(current, note or "Status note added", actor, actor_role, at=now)
            return Outcome.success(result)

        # ================================================================
        # Side effects
        # ================================================================
        order.payment_status = payment_status_after(new_status, order.payment_status)

        if new_status in RELEASING_STATUSES:
            result.inventory_restored = await self._inventory_ledger.restore_for_order(
                order, reason=f"Order {new_status.value}", at=now
            )

        if new_status == OrderStatus.SHIPPED and not order.courier.has_consignment:
            consignment = self._courier.build_local_consignment(
                order, warning="Consignment generated automatically on shipment"
            )
            apply_consignment(order, consignment, now)
            result.consignment_generated = True

        order.order_status = new_status
        order.record_timeline(
            new_status,
            note or f"Status changed from {current.value} to {new_status.value}",
            actor,
            actor_role,
            at=now,
        )
        order.record_event(
            OrderStatusChangedEvent(
                order_number=order.number,
                customer_email=order.customer_email,
                previous_status=current.value,
                new_status=new_status.value,
                actor=actor,
                note=note or None,
            )
        )

        logger.info(f"✅ Order {order.number}: {current.value} -> {new_status.value} by {actor} ({actor_role})")
        return Outcome.success(result)
