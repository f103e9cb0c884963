"""
Order aggregate root.

CRITICAL: This file must contain ZERO imports from:
- sqlalchemy
- pydantic
- fastapi
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from ..clock import ensure_utc, utc_now
from ..enums import OrderStatus, PaymentStatus
from ..events.base import DomainEvent
from ..value_objects import CommissionSnapshot, OrderNumber, ZERO, round_money


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _parse_dt(value: Optional[str]) -> Optional[datetime]:
    return ensure_utc(datetime.fromisoformat(value)) if value else None


def _method_name(candidate: Any) -> str:
    if isinstance(candidate, dict):
        candidate = (
            candidate.get("method")
            or candidate.get("type")
            or candidate.get("name")
            or candidate.get("value")
        )
    return str(candidate or "").strip()


@dataclass(frozen=True)
class ShippingAddress:
    """Shipping address snapshot taken at order time."""

    first_name: str
    last_name: str
    email: str
    phone: str
    address: str
    city: str
    postal_code: str
    district: str = ""
    country: str = ""

    REQUIRED_FIELDS = ("first_name", "last_name", "email", "phone", "address", "city", "postal_code")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def missing_fields(self) -> List[str]:
        return [name for name in self.REQUIRED_FIELDS if not str(getattr(self, name) or "").strip()]

    def one_line(self) -> str:
        parts = [self.address, self.district, self.city, self.postal_code, self.country]
        return ", ".join(part.strip() for part in parts if part and part.strip())

    def to_dict(self) -> Dict[str, str]:
        return {
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "address": self.address,
            "city": self.city,
            "postal_code": self.postal_code,
            "district": self.district,
            "country": self.country,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ShippingAddress":
        return cls(**{key: str(data.get(key) or "") for key in cls.__dataclass_fields__})


@dataclass
class PaymentDetails:
    """Normalized payment record attached to an order."""

    method: str
    provider_type: str = "manual"
    transaction_id: str = ""
    account_no: str = ""
    sent_from: str = ""
    sent_to: str = ""
    gateway_payment_id: Optional[str] = None
    gateway_session_id: Optional[str] = None
    meta: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def normalize(cls, raw: Optional[Dict[str, Any]], fallback_method: Any = "") -> "PaymentDetails":
        """
        Build a payment record from loosely shaped checkout input.

        The method is the first non-empty candidate among ``raw["method"]``,
        ``raw["paymentMethod"]`` / ``raw["payment_method"]`` and
        ``fallback_method``. A candidate may be a plain string or an object
        carrying the name under ``method``, ``type``, ``name`` or ``value``.
        """
        raw = raw or {}

        def text(key: str) -> str:
            return str(raw.get(key) or "").strip()

        candidates = (
            raw.get("method"),
            raw.get("paymentMethod"),
            raw.get("payment_method"),
            fallback_method,
        )
        return cls(
            method=next(filter(None, map(_method_name, candidates)), ""),
            provider_type=text("provider_type") or "manual",
            transaction_id=text("transaction_id"),
            account_no=text("account_no"),
            sent_from=text("sent_from"),
            sent_to=text("sent_to"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "method": self.method,
            "provider_type": self.provider_type,
            "transaction_id": self.transaction_id,
            "account_no": self.account_no,
            "sent_from": self.sent_from,
            "sent_to": self.sent_to,
            "gateway_payment_id": self.gateway_payment_id,
            "gateway_session_id": self.gateway_session_id,
            "meta": dict(self.meta),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PaymentDetails":
        return cls(
            method=data.get("method") or "",
            provider_type=data.get("provider_type") or "manual",
            transaction_id=data.get("transaction_id") or "",
            account_no=data.get("account_no") or "",
            sent_from=data.get("sent_from") or "",
            sent_to=data.get("sent_to") or "",
            gateway_payment_id=data.get("gateway_payment_id"),
            gateway_session_id=data.get("gateway_session_id"),
            meta=dict(data.get("meta") or {}),
        )


@dataclass(frozen=True)
class TimelineEntry:
    """One append-only entry of the order status timeline."""

    status: OrderStatus
    note: str
    actor: str
    actor_role: str
    at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "note": self.note,
            "actor": self.actor,
            "actor_role": self.actor_role,
            "at": self.at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TimelineEntry":
        return cls(
            status=OrderStatus(data["status"]),
            note=data.get("note") or "",
            actor=data.get("actor") or "",
            actor_role=data.get("actor_role") or "",
            at=_parse_dt(data.get("at")) or utc_now(),
        )


@dataclass(frozen=True)
class InventoryAdjustment:
    """Stock change applied (or skipped for backorder) for one order line."""

    product_id: str
    quantity: int
    variation_id: Optional[str] = None
    applied: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "product_id": self.product_id,
            "quantity": self.quantity,
            "variation_id": self.variation_id,
            "applied": self.applied,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InventoryAdjustment":
        return cls(
            product_id=data["product_id"],
            quantity=int(data["quantity"]),
            variation_id=data.get("variation_id"),
            applied=bool(data.get("applied", True)),
        )


@dataclass
class InventoryState:
    """Inventory effects of an order. ``restored`` makes restoration idempotent."""

    version: int = 1
    deducted: bool = False
    deducted_at: Optional[datetime] = None
    restored: bool = False
    restored_at: Optional[datetime] = None
    restored_reason: Optional[str] = None
    adjustments: List[InventoryAdjustment] = field(default_factory=list)

    @property
    def needs_restore(self) -> bool:
        return self.deducted and not self.restored

    def mark_deducted(self, adjustments: List[InventoryAdjustment], at: datetime) -> None:
        self.deducted = True
        self.deducted_at = at
        self.adjustments = list(adjustments)

    def mark_restored(self, reason: str, at: datetime) -> None:
        self.restored = True
        self.restored_at = at
        self.restored_reason = reason

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "deducted": self.deducted,
            "deducted_at": _iso(self.deducted_at),
            "restored": self.restored,
            "restored_at": _iso(self.restored_at),
            "restored_reason": self.restored_reason,
            "adjustments": [adjustment.to_dict() for adjustment in self.adjustments],
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "InventoryState":
        data = data or {}
        return cls(
            version=int(data.get("version", 1)),
            deducted=bool(data.get("deducted")),
            deducted_at=_parse_dt(data.get("deducted_at")),
            restored=bool(data.get("restored")),
            restored_at=_parse_dt(data.get("restored_at")),
            restored_reason=data.get("restored_reason"),
            adjustments=[InventoryAdjustment.from_dict(a) for a in data.get("adjustments") or []],
        )


@dataclass
class CourierState:
    """Shipment consignment and tracking data for an order."""

    version: int = 1
    provider: str = ""
    consignment_id: Optional[str] = None
    tracking_number: Optional[str] = None
    tracking_url: Optional[str] = None
    label_url: Optional[str] = None
    status: Optional[str] = None
    synced_from_api: bool = False
    generated_by: Optional[str] = None
    warning: Optional[str] = None
    last_unapplied_status: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_synced_at: Optional[datetime] = None
    events: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def has_consignment(self) -> bool:
        return bool(self.consignment_id)

    @property
    def reference(self) -> Optional[str]:
        return self.consignment_id or self.tracking_number

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "provider": self.provider,
            "consignment_id": self.consignment_id,
            "tracking_number": self.tracking_number,
            "tracking_url": self.tracking_url,
            "label_url": self.label_url,
            "status": self.status,
            "synced_from_api": self.synced_from_api,
            "generated_by": self.generated_by,
            "warning": self.warning,
            "last_unapplied_status": self.last_unapplied_status,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
            "last_synced_at": _iso(self.last_synced_at),
            "events": list(self.events),
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "CourierState":
        data = data or {}
        return cls(
            version=int(data.get("version", 1)),
            provider=data.get("provider") or "",
            consignment_id=data.get("consignment_id"),
            tracking_number=data.get("tracking_number"),
            tracking_url=data.get("tracking_url"),
            label_url=data.get("label_url"),
            status=data.get("status"),
            synced_from_api=bool(data.get("synced_from_api")),
            generated_by=data.get("generated_by"),
            warning=data.get("warning"),
            last_unapplied_status=data.get("last_unapplied_status"),
            created_at=_parse_dt(data.get("created_at")),
            updated_at=_parse_dt(data.get("updated_at")),
            last_synced_at=_parse_dt(data.get("last_synced_at")),
            events=list(data.get("events") or []),
        )


@dataclass
class ShippingMeta:
    """Structured shipping metadata: inventory and courier sub-records plus renewal trace."""

    inventory: InventoryState = field(default_factory=InventoryState)
    courier: CourierState = field(default_factory=CourierState)
    recurring_renewal: bool = False
    subscription_id: Optional[str] = None
    subscription_number: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "inventory": self.inventory.to_dict(),
            "courier": self.courier.to_dict(),
            "recurring_renewal": self.recurring_renewal,
            "subscription_id": self.subscription_id,
            "subscription_number": self.subscription_number,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ShippingMeta":
        data = data or {}
        return cls(
            inventory=InventoryState.from_dict(data.get("inventory")),
            courier=CourierState.from_dict(data.get("courier")),
            recurring_renewal=bool(data.get("recurring_renewal")),
            subscription_id=data.get("subscription_id"),
            subscription_number=data.get("subscription_number"),
        )


@dataclass(frozen=True)
class Attribution:
    """Where an order came from. Set at creation, never changed."""

    source_channel: str = "web"
    landing_page_id: Optional[str] = None
    created_by: Optional[str] = None


@dataclass
class OrderItem:
    """Individual line item within an order. ``unit_price`` is a snapshot."""

    product_id: str
    quantity: int
    unit_price: Decimal
    commission: CommissionSnapshot
    title: str = ""
    vendor_id: Optional[str] = None
    category_id: Optional[str] = None
    variation_id: Optional[str] = None
    variation_label: Optional[str] = None
    sku: Optional[str] = None

    def __post_init__(self):
        if self.quantity < 1:
            raise ValueError(f"Quantity must be at least 1, got: {self.quantity}")
        self.unit_price = round_money(self.unit_price)
        if self.unit_price < ZERO:
            raise ValueError(f"Unit price cannot be negative: {self.unit_price}")

    @property
    def line_total(self) -> Decimal:
        return round_money(self.unit_price * self.quantity)


@dataclass
class Order:
    """
    Order aggregate root.

    Created once at checkout (or by the renewal sweep) and mutated only
    through the status state machine or courier sync afterwards.
    """

    order_number: OrderNumber
    items: List[OrderItem]
    shipping_address: ShippingAddress
    payment_method: str
    payment_details: PaymentDetails
    subtotal: Decimal = ZERO
    shipping_fee: Decimal = ZERO
    discount: Decimal = ZERO
    total: Decimal = ZERO
    user_id: Optional[str] = None
    coupon_code: Optional[str] = None
    order_status: OrderStatus = OrderStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    status_timeline: List[TimelineEntry] = field(default_factory=list)
    shipping_meta: ShippingMeta = field(default_factory=ShippingMeta)
    attribution: Attribution = field(default_factory=Attribution)
    notes: str = ""
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    _domain_events: List[DomainEvent] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self):
        for name in ("subtotal", "shipping_fee", "discount", "total"):
            amount = round_money(getattr(self, name))
            if amount < ZERO:
                raise ValueError(f"{name} cannot be negative: {amount}")
            setattr(self, name, amount)

    @property
    def number(self) -> str:
        return self.order_number.value

    @property
    def customer_email(self) -> str:
        return self.shipping_address.email

    @property
    def inventory(self) -> InventoryState:
        return self.shipping_meta.inventory

    @property
    def courier(self) -> CourierState:
        return self.shipping_meta.courier

    def record_timeline(
        self,
        status: OrderStatus,
        note: str,
        actor: str,
        actor_role: str,
        at: Optional[datetime] = None,
    ) -> TimelineEntry:
        """Append a timeline entry. Entries are never edited or removed."""
        entry = TimelineEntry(
            status=status,
            note=note,
            actor=actor,
            actor_role=actor_role,
            at=at or utc_now(),
        )
        self.status_timeline.append(entry)
        self.updated_at = entry.at
        return entry

    def get_domain_events(self) -> List[DomainEvent]:
        """Get uncommitted domain events."""
        return list(self._domain_events)

    def clear_domain_events(self) -> None:
        self._domain_events.clear()

    def record_event(self, event: DomainEvent) -> None:
        self._domain_events.append(event)
