"""Recording courier results on the order's courier state."""
from datetime import datetime

from core.application.interfaces import ConsignmentResult, TrackingResult
from core.domain.entities import Order
from core.domain.events import CourierConsignmentCreatedEvent


def apply_consignment(order: Order, result: ConsignmentResult, at: datetime) -> None:
    """Attach a consignment to the order and record the matching event."""
    courier = order.courier
    courier.provider = result.provider
    courier.consignment_id = result.consignment_id
    courier.tracking_number = result.tracking_number
    courier.tracking_url = result.tracking_url
    courier.label_url = result.label_url
    courier.status = result.status
    courier.generated_by = result.generated_by
    courier.synced_from_api = result.synced_from_api
    courier.warning = result.warning
    courier.created_at = courier.created_at or at
    courier.updated_at = at
    order.updated_at = at

    order.record_event(
        CourierConsignmentCreatedEvent(
            order_number=order.number,
            consignment_id=result.consignment_id,
            customer_email=order.customer_email,
            tracking_url=result.tracking_url,
            generated_by=result.generated_by,
            warning=result.warning,
        )
    )


def apply_tracking(order: Order, tracking: TrackingResult, at: datetime) -> None:
    """Merge a tracking response into the courier state (status, url, events)."""
    courier = order.courier
    if tracking.status:
        courier.status = tracking.status
    if tracking.tracking_url:
        courier.tracking_url = tracking.tracking_url
    if tracking.events:
        courier.events = list(tracking.events)
    courier.synced_from_api = True
    courier.last_synced_at = at
    courier.updated_at = at
    order.updated_at = at
