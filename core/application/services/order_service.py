"""Application service for post-checkout order operations."""

import logging
from dataclasses import dataclass
from typing import Optional

from core.application.interfaces import ICourierGateway
from core.domain.clock import utc_now
from core.domain.entities import Order
from core.domain.enums import OrderStatus
from core.domain.event_bus import EventBus
from core.domain.repositories import OrderRepository
from core.domain.result import ErrorKind, Outcome
from core.domain.services import can_transition, map_courier_status

from .consignments import apply_consignment, apply_tracking
from .order_status_machine import OrderStatusMachine, TransitionResult

logger = logging.getLogger(__name__)

OWNER_CANCELLABLE = (OrderStatus.PENDING, OrderStatus.CONFIRMED)
COURIER_SYNC_ACTOR = "courier-sync"


@dataclass
class CourierSyncResult:
    """Outcome details of a tracking sync."""

    order: Order
    provider_status: Optional[str]
    mapped_status: Optional[OrderStatus]
    status_applied: bool
    reason: Optional[str] = None


class OrderApplicationService:
    """
    Application service for orchestrating order operations.

    Responsibilities:
    - Load and persist orders around state machine calls
    - Courier consignment, tracking sync and label lookup
    - Publish domain events recorded on the order
    """

    def __init__(
        self,
        orders: OrderRepository,
        status_machine: OrderStatusMachine,
        courier: ICourierGateway,
        event_bus: EventBus,
    ) -> None:
        self._orders = orders
        self._status_machine = status_machine
        self._courier = courier
        self._event_bus = event_bus

    async def get_order(self, order_number: str) -> Outcome[Order]:
        order = await self._orders.get(order_number)
        if order is None:
            return Outcome.failure(ErrorKind.NOT_FOUND, "Order not found")
        return Outcome.success(order)

    async def update_status(
        self,
        order_number: str,
        status: str,
        actor: str,
        actor_role: str,
        note: str = "",
    ) -> Outcome[TransitionResult]:
        """Apply an admin/vendor status update and persist it.

        Args:
            order_number: Order to update
            status: Requested status
            actor: Acting user id
            actor_role: Acting user role
            note: Optional timeline note

        Returns:
            Outcome from the state machine
        """
        found = await self.get_order(order_number)
        if not found.ok:
            return found.cast()

        order = found.value
        outcome = await self._status_machine.transition(order, status, actor, actor_role, note)
        if outcome.ok:
            await self._persist(order)
        return outcome

    async def cancel_order(
        self, order_number: str, user_id: str, reason: str = ""
    ) -> Outcome[TransitionResult]:
        """Owner cancellation, allowed while the order is pending or confirmed."""
        order = await self._orders.get(order_number)
        if order is None or not user_id or order.user_id != user_id:
            return Outcome.failure(ErrorKind.NOT_FOUND, "Order not found")

        if order.order_status not in OWNER_CANCELLABLE:
            return Outcome.failure(
                ErrorKind.CONFLICT,
                f"Order can no longer be cancelled (status: {order.order_status.value})",
            )

        outcome = await self._status_machine.transition(
            order,
            OrderStatus.CANCELLED,
            actor=user_id,
            actor_role="customer",
            note=reason or "Cancelled by customer",
        )
        if outcome.ok:
            await self._persist(order)
        return outcome

    async def generate_consignment(
        self, order_number: str, force: bool = False
    ) -> Outcome[Order]:
        """Create a courier consignment (remote, or local fallback with a warning)."""
        found = await self.get_order(order_number)
        if not found.ok:
            return found

        order = found.value
        if order.order_status in (OrderStatus.CANCELLED, OrderStatus.RETURNED):
            return Outcome.failure(
                ErrorKind.VALIDATION,
                f"Cannot create a consignment for a {order.order_status.value} order",
            )
        if order.courier.has_consignment and not force:
            return Outcome.failure(
                ErrorKind.CONFLICT,
                "Order already has a courier consignment",
                consignment_id=order.courier.consignment_id,
            )

        result = await self._courier.generate_consignment(order)
        apply_consignment(order, result, utc_now())
        await self._persist(order)

        if result.warning:
            logger.warning(f"Consignment for {order.number} generated locally: {result.warning}")
        return Outcome.success(order, message=result.warning or "")

    async def sync_courier_tracking(self, order_number: str) -> Outcome[CourierSyncResult]:
        """
        Pull tracking data and apply the mapped order status when legal.

        An unmapped status, or one that is not reachable from the current
        order status, only updates courier metadata. The result reports
        ``status_applied=False`` with the reason.
        """
        found = await self.get_order(order_number)
        if not found.ok:
            return found.cast()

        order = found.value
        if not order.courier.reference:
            return Outcome.failure(ErrorKind.VALIDATION, "Order has no courier consignment to sync")

        fetched = await self._courier.fetch_tracking(order)
        if not fetched.ok:
            return fetched.cast()

        tracking = fetched.value
        apply_tracking(order, tracking, utc_now())

        mapped = map_courier_status(tracking.status)
        result = CourierSyncResult(
            order=order,
            provider_status=tracking.status,
            mapped_status=mapped,
            status_applied=False,
        )

        if mapped is None:
            result.reason = f"Courier status '{tracking.status}' has no order status mapping"
        elif mapped == order.order_status:
            result.reason = "Order already has the mapped status"
        elif not can_transition(order.order_status, mapped):
            result.reason = (
                f"Courier status '{tracking.status}' maps to {mapped.value}, "
                f"which is not reachable from {order.order_status.value}"
            )
            order.courier.last_unapplied_status = tracking.status
            logger.warning(f"Order {order.number}: {result.reason}; order status unchanged")
        else:
            transition = await self._status_machine.transition(
                order,
                mapped,
                actor=COURIER_SYNC_ACTOR,
                actor_role="system",
                note=f"Courier status: {tracking.status}",
            )
            result.status_applied = transition.ok
            if transition.ok:
                order.courier.last_unapplied_status = None
            else:
                result.reason = transition.message

        await self._persist(order)
        return Outcome.success(result)

    async def get_courier_label(self, order_number: str) -> Outcome[str]:
        found = await self.get_order(order_number)
        if not found.ok:
            return found.cast()
        label_url = found.value.courier.label_url
        if not label_url:
            return Outcome.failure(ErrorKind.NOT_FOUND, "No courier label available for this order")
        return Outcome.success(label_url)

    async def _persist(self, order: Order) -> None:
        await self._orders.save(order)
        events = order.get_domain_events()
        if events:
            await self._event_bus.publish_all(events)
            order.clear_domain_events()
