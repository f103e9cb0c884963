"""Application DTOs for Order operations."""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from core.application.services.order_builder import CheckoutLine
from core.domain.entities import Order, OrderItem, ShippingAddress


class CheckoutItemDTO(BaseModel):
    """Cart line as sent by the client."""

    product_id: str = Field(..., min_length=1, description="Product ID")
    quantity: int = Field(default=1, description="Requested quantity (values below 1 count as 1)")
    variation_id: Optional[str] = Field(None, description="Variation ID for variable products")
    price: Optional[Decimal] = Field(None, description="Client-side price, used only as a fallback")

    def to_line(self) -> CheckoutLine:
        return CheckoutLine(
            product_id=self.product_id,
            quantity=self.quantity,
            variation_id=self.variation_id,
            price=self.price,
        )


class ShippingAddressDTO(BaseModel):
    """Shipping address."""

    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    postal_code: str = ""
    district: str = ""
    country: str = ""

    def to_entity(self) -> ShippingAddress:
        return ShippingAddress(**self.model_dump())


class CheckoutRequestDTO(BaseModel):
    """Request DTO for placing an order."""

    items: List[CheckoutItemDTO] = Field(default_factory=list, description="Cart lines")
    shipping_address: ShippingAddressDTO
    payment_method: Union[str, Dict[str, Any]] = Field(
        default="", description="Payment method name, or an object carrying it"
    )
    payment_details: Dict[str, Any] = Field(default_factory=dict, description="Raw payment details")
    shipping_fee: Decimal = Field(default=Decimal("0"), description="Requested shipping fee")
    coupon_code: Optional[str] = None
    notes: str = ""
    source_channel: str = Field(default="web", description="Attribution channel")
    landing_page_id: Optional[str] = None
    user_id: Optional[str] = Field(None, description="Customer account (manual orders only)")


class StatusUpdateDTO(BaseModel):
    """Request DTO for an admin status update."""

    status: str = Field(..., description="Target order status")
    note: str = ""


class CancelOrderDTO(BaseModel):
    reason: str = ""


class CommissionDTO(BaseModel):
    amount: Decimal
    source: str
    type: Optional[str] = None
    value: Decimal
    fixed_amount: Decimal
    net_amount: Decimal

    model_config = {"frozen": True}


class OrderItemDTO(BaseModel):
    """DTO for order item."""

    product_id: str
    title: str = ""
    quantity: int = Field(..., gt=0)
    unit_price: Decimal = Field(..., ge=0)
    line_total: Decimal = Field(..., ge=0)
    vendor_id: Optional[str] = None
    variation_id: Optional[str] = None
    variation_label: Optional[str] = None
    sku: Optional[str] = None
    commission: CommissionDTO

    model_config = {"frozen": True}

    @classmethod
    def from_entity(cls, item: OrderItem) -> "OrderItemDTO":
        snapshot = item.commission
        return cls(
            product_id=item.product_id,
            title=item.title,
            quantity=item.quantity,
            unit_price=item.unit_price,
            line_total=item.line_total,
            vendor_id=item.vendor_id,
            variation_id=item.variation_id,
            variation_label=item.variation_label,
            sku=item.sku,
            commission=CommissionDTO(
                amount=snapshot.amount,
                source=snapshot.source.value,
                type=snapshot.type.value if snapshot.type else None,
                value=snapshot.value,
                fixed_amount=snapshot.fixed_amount,
                net_amount=snapshot.net_amount,
            ),
        )


class TimelineEntryDTO(BaseModel):
    status: str
    note: str
    actor: str
    actor_role: str
    at: datetime

    model_config = {"frozen": True}


class OrderDTO(BaseModel):
    """Response DTO for order details."""

    order_number: str
    user_id: Optional[str] = None
    items: List[OrderItemDTO] = Field(default_factory=list)
    shipping_address: Dict[str, str]
    subtotal: Decimal
    shipping_fee: Decimal
    discount: Decimal
    total: Decimal
    coupon_code: Optional[str] = None
    payment_method: str
    payment_details: Dict[str, Any]
    order_status: str
    payment_status: str
    status_timeline: List[TimelineEntryDTO] = Field(default_factory=list)
    shipping_meta: Dict[str, Any]
    source_channel: str
    landing_page_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"frozen": True}

    @classmethod
    def from_entity(cls, order: Order) -> "OrderDTO":
        return cls(
            order_number=order.number,
            user_id=order.user_id,
            items=[OrderItemDTO.from_entity(item) for item in order.items],
            shipping_address=order.shipping_address.to_dict(),
            subtotal=order.subtotal,
            shipping_fee=order.shipping_fee,
            discount=order.discount,
            total=order.total,
            coupon_code=order.coupon_code,
            payment_method=order.payment_method,
            payment_details=order.payment_details.to_dict(),
            order_status=order.order_status.value,
            payment_status=order.payment_status.value,
            status_timeline=[
                TimelineEntryDTO(
                    status=entry.status.value,
                    note=entry.note,
                    actor=entry.actor,
                    actor_role=entry.actor_role,
                    at=entry.at,
                )
                for entry in order.status_timeline
            ],
            shipping_meta=order.shipping_meta.to_dict(),
            source_channel=order.attribution.source_channel,
            landing_page_id=order.attribution.landing_page_id,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class CheckoutResponseDTO(BaseModel):
    """Response DTO for a placed order."""

    order: OrderDTO
    payment_url: Optional[str] = None
    payment_error: Optional[str] = None
    subscriptions_created: int = 0
    execution_id: str


class StatusUpdateResponseDTO(BaseModel):
    order: OrderDTO
    previous_status: str
    changed: bool
    inventory_restored: bool
    consignment_generated: bool


class CourierSyncResponseDTO(BaseModel):
    order: OrderDTO
    provider_status: Optional[str] = None
    mapped_status: Optional[str] = None
    status_applied: bool
    reason: Optional[str] = None
