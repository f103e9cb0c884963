"""
Orders endpoints.

Checkout, order lookup, status updates, owner cancellation and courier
operations.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.encoders import jsonable_encoder
import logging

from api.dependencies import Actor, get_actor, get_order_service, get_place_order_use_case
from api.errors import forbidden, raise_for_outcome, unauthorized
from core.application.dtos import (
    CancelOrderDTO,
    CheckoutRequestDTO,
    CheckoutResponseDTO,
    CourierSyncResponseDTO,
    OrderDTO,
    StatusUpdateDTO,
    StatusUpdateResponseDTO,
)
from core.application.services import OrderApplicationService
from core.application.use_cases import (
    ADMIN_MANUAL_CHANNEL,
    PlaceOrderRequest,
    PlaceOrderResponse,
    PlaceOrderUseCase,
)


logger = logging.getLogger(__name__)
router = APIRouter()


def _to_request(body: CheckoutRequestDTO, user_id, created_by=None) -> PlaceOrderRequest:
    return PlaceOrderRequest(
        items=[item.to_line() for item in body.items],
        shipping_address=body.shipping_address.to_entity(),
        payment_method=body.payment_method,
        payment_details=body.payment_details,
        shipping_fee=body.shipping_fee,
        coupon_code=body.coupon_code,
        user_id=user_id,
        notes=body.notes,
        source_channel=body.source_channel,
        landing_page_id=body.landing_page_id,
        created_by=created_by,
    )


def _checkout_result(response: PlaceOrderResponse) -> CheckoutResponseDTO:
    if not response.success:
        raise HTTPException(
            status_code=response.status,
            detail=jsonable_encoder(
                {
                    "error": response.error_kind.value if response.error_kind else "internal",
                    "message": response.error,
                    "execution_id": str(response.execution_id),
                    **response.error_details,
                }
            ),
        )
    return CheckoutResponseDTO(
        order=OrderDTO.from_entity(response.order),
        payment_url=response.payment_url,
        payment_error=response.payment_error,
        subscriptions_created=response.subscriptions_created,
        execution_id=str(response.execution_id),
    )


async def _load_visible_order(order_number: str, actor: Actor, service: OrderApplicationService):
    outcome = await service.get_order(order_number)
    raise_for_outcome(outcome)
    order = outcome.value
    if not actor.is_admin and (actor.id is None or order.user_id != actor.id):
        # Other customers' orders are reported as missing
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "not_found", "message": "Order not found"},
        )
    return order


# =============================================================================
# CHECKOUT
# =============================================================================

@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=CheckoutResponseDTO,
    summary="Place an order",
    description="Checkout for a signed-in customer, or a manual order entered by an admin",
)
async def place_order(
    body: CheckoutRequestDTO,
    actor: Actor = Depends(get_actor),
    use_case: PlaceOrderUseCase = Depends(get_place_order_use_case),
):
    """
    Place an order.

    **Manual orders:** send `source_channel=admin_manual` as an admin; the
    order is attributed to `user_id` from the body (or a guest).
    """
    if body.source_channel == ADMIN_MANUAL_CHANNEL:
        if not actor.is_admin:
            raise forbidden("Only admins can create manual orders")
        request = _to_request(body, user_id=body.user_id, created_by=actor.id)
    else:
        if actor.id is None:
            raise unauthorized()
        request = _to_request(body, user_id=actor.id)

    return _checkout_result(await use_case.execute(request))


@router.post(
    "/guest",
    status_code=status.HTTP_201_CREATED,
    response_model=CheckoutResponseDTO,
    summary="Place a guest order",
)
async def place_guest_order(
    body: CheckoutRequestDTO,
    use_case: PlaceOrderUseCase = Depends(get_place_order_use_case),
):
    if body.source_channel == ADMIN_MANUAL_CHANNEL:
        raise forbidden("Only admins can create manual orders")
    return _checkout_result(await use_case.execute(_to_request(body, user_id=None)))


# =============================================================================
# GET ORDER
# =============================================================================

@router.get(
    "/{order_number}",
    response_model=OrderDTO,
    summary="Get order by number",
)
async def get_order(
    order_number: str,
    actor: Actor = Depends(get_actor),
    service: OrderApplicationService = Depends(get_order_service),
):
    order = await _load_visible_order(order_number, actor, service)
    return OrderDTO.from_entity(order)


# =============================================================================
# STATUS
# =============================================================================

@router.patch(
    "/{order_number}/status",
    response_model=StatusUpdateResponseDTO,
    summary="Update order status",
    description="Apply a lifecycle transition; rejected transitions list the allowed next statuses",
)
async def update_order_status(
    order_number: str,
    body: StatusUpdateDTO,
    actor: Actor = Depends(get_actor),
    service: OrderApplicationService = Depends(get_order_service),
):
    if not actor.is_admin:
        raise forbidden("Only admins can update order status")

    outcome = await service.update_status(
        order_number, body.status, actor=actor.id or actor.role, actor_role=actor.role, note=body.note
    )
    raise_for_outcome(outcome)
    result = outcome.value
    return StatusUpdateResponseDTO(
        order=OrderDTO.from_entity(result.order),
        previous_status=result.previous_status.value,
        changed=result.changed,
        inventory_restored=result.inventory_restored,
        consignment_generated=result.consignment_generated,
    )


@router.post(
    "/{order_number}/cancel",
    response_model=StatusUpdateResponseDTO,
    summary="Cancel own order",
)
async def cancel_order(
    order_number: str,
    body: CancelOrderDTO,
    actor: Actor = Depends(get_actor),
    service: OrderApplicationService = Depends(get_order_service),
):
    if actor.id is None:
        raise unauthorized()

    outcome = await service.cancel_order(order_number, actor.id, reason=body.reason)
    raise_for_outcome(outcome)
    result = outcome.value
    return StatusUpdateResponseDTO(
        order=OrderDTO.from_entity(result.order),
        previous_status=result.previous_status.value,
        changed=result.changed,
        inventory_restored=result.inventory_restored,
        consignment_generated=result.consignment_generated,
    )


# =============================================================================
# COURIER
# =============================================================================

@router.post(
    "/{order_number}/courier/consignment",
    summary="Create courier consignment",
)
async def generate_consignment(
    order_number: str,
    force: bool = Query(default=False, description="Replace an existing consignment"),
    actor: Actor = Depends(get_actor),
    service: OrderApplicationService = Depends(get_order_service),
):
    if not actor.is_admin:
        raise forbidden()

    outcome = await service.generate_consignment(order_number, force=force)
    raise_for_outcome(outcome)
    return {
        "order": OrderDTO.from_entity(outcome.value),
        "warning": outcome.message or None,
    }


@router.post(
    "/{order_number}/courier/sync",
    response_model=CourierSyncResponseDTO,
    summary="Sync courier tracking",
)
async def sync_courier_tracking(
    order_number: str,
    actor: Actor = Depends(get_actor),
    service: OrderApplicationService = Depends(get_order_service),
):
    if not actor.is_admin:
        raise forbidden()

    outcome = await service.sync_courier_tracking(order_number)
    raise_for_outcome(outcome)
    result = outcome.value
    return CourierSyncResponseDTO(
        order=OrderDTO.from_entity(result.order),
        provider_status=result.provider_status,
        mapped_status=result.mapped_status.value if result.mapped_status else None,
        status_applied=result.status_applied,
        reason=result.reason,
    )


@router.get(
    "/{order_number}/courier/label",
    summary="Get courier label URL",
)
async def get_courier_label(
    order_number: str,
    actor: Actor = Depends(get_actor),
    service: OrderApplicationService = Depends(get_order_service),
):
    if not actor.is_admin:
        raise forbidden()

    outcome = await service.get_courier_label(order_number)
    raise_for_outcome(outcome)
    return {"order_number": order_number, "label_url": outcome.value}
