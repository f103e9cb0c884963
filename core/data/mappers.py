"""Static mappers for domain entities ↔ database models."""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Optional

from core.domain.clock import ensure_utc
from core.domain.entities import (
    Attribution,
    Category,
    CustomerAccount,
    Order,
    OrderItem,
    PaymentDetails,
    Product,
    ProductVariation,
    RecurringPlan,
    RenewalEvent,
    ShippingAddress,
    ShippingMeta,
    Subscription,
    TimelineEntry,
    Vendor,
)
from core.domain.enums import (
    BillingInterval,
    OrderStatus,
    PaymentStatus,
    SubscriptionStatus,
)
from core.domain.value_objects import CommissionRule, CommissionSnapshot, OrderNumber

from .models import (
    CategoryModel,
    CustomerModel,
    OrderItemModel,
    OrderModel,
    ProductModel,
    ProductVariationModel,
    SubscriptionModel,
    VendorModel,
)


def to_db_datetime(value: Optional[datetime]) -> Optional[datetime]:
    """Aware datetime -> naive UTC (portable across SQL backends)."""
    if value is None:
        return None
    return ensure_utc(value).replace(tzinfo=None)


def from_db_datetime(value: Optional[datetime]) -> Optional[datetime]:
    """Naive UTC column value -> aware UTC datetime."""
    if value is None:
        return None
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else ensure_utc(value)


def _decimal(value: Any) -> Optional[Decimal]:
    return Decimal(str(value)) if value is not None else None


def _rule_to_domain(raw_type: str, value: Any, fixed: Any) -> CommissionRule:
    return CommissionRule.normalize(raw_type, value, fixed)


class OrderItemMapper:
    """Static mapper for OrderItem ↔ OrderItemModel transformation."""

    @staticmethod
    def to_domain(model: OrderItemModel) -> OrderItem:
        return OrderItem(
            product_id=model.product_id,
            quantity=model.quantity,
            unit_price=_decimal(model.unit_price),
            commission=CommissionSnapshot.from_dict(model.commission or {}),
            title=model.title or "",
            vendor_id=model.vendor_id,
            category_id=model.category_id,
            variation_id=model.variation_id,
            variation_label=model.variation_label,
            sku=model.sku,
        )

    @staticmethod
    def to_persistence(entity: OrderItem, order_number: str, position: int) -> OrderItemModel:
        return OrderItemModel(
            order_number=order_number,
            position=position,
            product_id=entity.product_id,
            title=entity.title,
            vendor_id=entity.vendor_id,
            category_id=entity.category_id,
            variation_id=entity.variation_id,
            variation_label=entity.variation_label,
            sku=entity.sku,
            quantity=entity.quantity,
            unit_price=entity.unit_price,
            commission=entity.commission.to_dict(),
        )


class OrderMapper:
    """Static mapper for Order ↔ OrderModel transformation with nested items."""

    @staticmethod
    def to_domain(model: OrderModel) -> Order:
        """Convert ORM model to domain aggregate (with nested items).

        Args:
            model: OrderModel instance

        Returns:
            Order domain aggregate
        """
        return Order(
            order_number=OrderNumber(model.order_number),
            items=[OrderItemMapper.to_domain(item) for item in model.items],
            shipping_address=ShippingAddress.from_dict(model.shipping_address or {}),
            payment_method=model.payment_method,
            payment_details=PaymentDetails.from_dict(model.payment_details or {}),
            subtotal=_decimal(model.subtotal),
            shipping_fee=_decimal(model.shipping_fee),
            discount=_decimal(model.discount),
            total=_decimal(model.total),
            user_id=model.user_id,
            coupon_code=model.coupon_code,
            order_status=OrderStatus(model.order_status),
            payment_status=PaymentStatus(model.payment_status),
            status_timeline=[TimelineEntry.from_dict(entry) for entry in model.status_timeline or []],
            shipping_meta=ShippingMeta.from_dict(model.shipping_meta),
            attribution=Attribution(
                source_channel=model.source_channel,
                landing_page_id=model.landing_page_id,
                created_by=model.created_by,
            ),
            notes=model.notes or "",
            created_at=from_db_datetime(model.created_at),
            updated_at=from_db_datetime(model.updated_at),
        )

    @staticmethod
    def to_persistence(entity: Order) -> OrderModel:
        """Convert domain aggregate to ORM model (with nested items).

        Args:
            entity: Order domain aggregate

        Returns:
            OrderModel instance
        """
        model = OrderModel(order_number=entity.number)
        return OrderMapper.update_persistence(entity, model)

    @staticmethod
    def update_persistence(entity: Order, model: OrderModel) -> OrderModel:
        """Update existing ORM model from domain entity (for updates).

        Attribution is written on insert only.
        """
        if model.created_at is None:
            model.source_channel = entity.attribution.source_channel
            model.landing_page_id = entity.attribution.landing_page_id
            model.created_by = entity.attribution.created_by
            model.created_at = to_db_datetime(entity.created_at)

        model.user_id = entity.user_id
        model.customer_email = (entity.shipping_address.email or "").strip().lower()
        model.customer_phone = (entity.shipping_address.phone or "").strip()
        model.shipping_address = entity.shipping_address.to_dict()
        model.payment_method = entity.payment_method
        model.payment_details = entity.payment_details.to_dict()
        model.subtotal = entity.subtotal
        model.shipping_fee = entity.shipping_fee
        model.discount = entity.discount
        model.total = entity.total
        model.coupon_code = entity.coupon_code
        model.order_status = entity.order_status.value
        model.payment_status = entity.payment_status.value
        model.status_timeline = [entry.to_dict() for entry in entity.status_timeline]
        model.shipping_meta = entity.shipping_meta.to_dict()
        model.notes = entity.notes
        model.updated_at = to_db_datetime(entity.updated_at)

        # Clear and rebuild items
        model.items = [
            OrderItemMapper.to_persistence(item, entity.number, position)
            for position, item in enumerate(entity.items)
        ]
        return model


class SubscriptionMapper:
    """Static mapper for Subscription ↔ SubscriptionModel transformation."""

    @staticmethod
    def to_domain(model: SubscriptionModel) -> Subscription:
        return Subscription(
            id=model.id,
            subscription_number=model.subscription_number,
            product_id=model.product_id,
            source_order_number=model.source_order_number,
            source_item_key=model.source_item_key,
            unit_price=_decimal(model.unit_price),
            interval=BillingInterval(model.interval),
            starts_at=from_db_datetime(model.starts_at),
            user_id=model.user_id,
            guest_email=model.guest_email,
            vendor_id=model.vendor_id,
            variation_id=model.variation_id,
            variation_label=model.variation_label,
            product_title=model.product_title or "",
            quantity=model.quantity,
            currency=model.currency,
            interval_count=model.interval_count,
            total_cycles=model.total_cycles,
            completed_cycles=model.completed_cycles,
            trial_days=model.trial_days,
            next_billing_at=from_db_datetime(model.next_billing_at),
            last_billed_at=from_db_datetime(model.last_billed_at),
            status=SubscriptionStatus(model.status),
            payment_method=model.payment_method or "",
            shipping_address=(
                ShippingAddress.from_dict(model.shipping_address) if model.shipping_address else None
            ),
            renewal_history=[RenewalEvent.from_dict(entry) for entry in model.renewal_history or []],
        )

    @staticmethod
    def update_persistence(entity: Subscription, model: SubscriptionModel) -> SubscriptionModel:
        model.subscription_number = entity.subscription_number
        model.source_order_number = entity.source_order_number
        model.source_item_key = entity.source_item_key
        model.product_id = entity.product_id
        model.product_title = entity.product_title
        model.vendor_id = entity.vendor_id
        model.variation_id = entity.variation_id
        model.variation_label = entity.variation_label
        model.user_id = entity.user_id
        model.guest_email = entity.guest_email
        model.quantity = entity.quantity
        model.unit_price = entity.unit_price
        model.currency = entity.currency
        model.interval = entity.interval.value
        model.interval_count = entity.interval_count
        model.total_cycles = entity.total_cycles
        model.completed_cycles = entity.completed_cycles
        model.trial_days = entity.trial_days
        model.starts_at = to_db_datetime(entity.starts_at)
        model.next_billing_at = to_db_datetime(entity.next_billing_at)
        model.last_billed_at = to_db_datetime(entity.last_billed_at)
        model.status = entity.status.value
        model.payment_method = entity.payment_method
        model.shipping_address = entity.shipping_address.to_dict() if entity.shipping_address else None
        model.renewal_history = [event.to_dict() for event in entity.renewal_history]
        return model


class CatalogMapper:
    """Static mappers for catalog rows (read side, plus seeding)."""

    @staticmethod
    def product_to_domain(model: ProductModel) -> Product:
        recurring = None
        if model.recurring:
            recurring = RecurringPlan(
                interval=BillingInterval(model.recurring.get("interval") or BillingInterval.MONTHLY.value),
                interval_count=model.recurring.get("interval_count") or 1,
                total_cycles=model.recurring.get("total_cycles") or 0,
                trial_days=model.recurring.get("trial_days") or 0,
            )
        return Product(
            id=model.id,
            title=model.title,
            price=_decimal(model.price),
            sale_price=_decimal(model.sale_price),
            price_type=model.price_type,
            marketplace_type=model.marketplace_type,
            approval_status=model.approval_status,
            is_active=model.is_active,
            stock=model.stock,
            allow_backorder=model.allow_backorder,
            sku=model.sku,
            vendor_id=model.vendor_id,
            category_id=model.category_id,
            commission=_rule_to_domain(model.commission_type, model.commission_value, model.commission_fixed),
            variations=[
                ProductVariation(
                    id=variation.id,
                    label=variation.label,
                    sku=variation.sku,
                    price=_decimal(variation.price),
                    sale_price=_decimal(variation.sale_price),
                    stock=variation.stock,
                    is_active=variation.is_active,
                )
                for variation in model.variations
            ],
            recurring=recurring,
        )

    @staticmethod
    def product_to_persistence(entity: Product) -> ProductModel:
        recurring: Optional[Dict[str, Any]] = None
        if entity.recurring:
            recurring = {
                "interval": entity.recurring.interval.value,
                "interval_count": entity.recurring.interval_count,
                "total_cycles": entity.recurring.total_cycles,
                "trial_days": entity.recurring.trial_days,
            }
        return ProductModel(
            id=entity.id,
            title=entity.title,
            price=entity.price,
            sale_price=entity.sale_price,
            price_type=entity.price_type,
            marketplace_type=entity.marketplace_type,
            approval_status=entity.approval_status,
            is_active=entity.is_active,
            stock=entity.stock,
            allow_backorder=entity.allow_backorder,
            sku=entity.sku,
            vendor_id=entity.vendor_id,
            category_id=entity.category_id,
            commission_type=entity.commission.type.value,
            commission_value=entity.commission.value,
            commission_fixed=entity.commission.fixed_amount,
            recurring=recurring,
            variations=[
                ProductVariationModel(
                    id=variation.id,
                    label=variation.label,
                    sku=variation.sku,
                    price=variation.price,
                    sale_price=variation.sale_price,
                    stock=variation.stock,
                    is_active=variation.is_active,
                )
                for variation in entity.variations
            ],
        )

    @staticmethod
    def vendor_to_domain(model: VendorModel) -> Vendor:
        return Vendor(
            id=model.id,
            store_name=model.store_name,
            status=model.status,
            vacation_mode=model.vacation_mode,
            commission=_rule_to_domain(model.commission_type, model.commission_value, model.commission_fixed),
        )

    @staticmethod
    def vendor_to_persistence(entity: Vendor) -> VendorModel:
        return VendorModel(
            id=entity.id,
            store_name=entity.store_name,
            status=entity.status,
            vacation_mode=entity.vacation_mode,
            commission_type=entity.commission.type.value,
            commission_value=entity.commission.value,
            commission_fixed=entity.commission.fixed_amount,
        )

    @staticmethod
    def category_to_domain(model: CategoryModel) -> Category:
        return Category(
            id=model.id,
            name=model.name,
            commission=_rule_to_domain(model.commission_type, model.commission_value, model.commission_fixed),
        )

    @staticmethod
    def category_to_persistence(entity: Category) -> CategoryModel:
        return CategoryModel(
            id=entity.id,
            name=entity.name,
            commission_type=entity.commission.type.value,
            commission_value=entity.commission.value,
            commission_fixed=entity.commission.fixed_amount,
        )

    @staticmethod
    def customer_to_domain(model: CustomerModel) -> CustomerAccount:
        return CustomerAccount(
            id=model.id,
            name=model.name or "",
            email=model.email,
            phone=model.phone,
            is_blacklisted=model.is_blacklisted,
            blacklist_reason=model.blacklist_reason,
        )

    @staticmethod
    def customer_to_persistence(entity: CustomerAccount) -> CustomerModel:
        return CustomerModel(
            id=entity.id,
            name=entity.name,
            email=(entity.email or "").strip().lower() or None,
            phone=entity.phone,
            is_blacklisted=entity.is_blacklisted,
            blacklist_reason=entity.blacklist_reason,
        )
