"""
FastAPI Dependencies.

Provides dependency injection for use cases and services.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from fastapi import Header

# Load environment variables ONCE before any settings objects are created
_PROJECT_ROOT = Path(__file__).resolve().parents[1]
load_dotenv(dotenv_path=_PROJECT_ROOT / ".env")

from core.application.interfaces import (
    ICouponValidator,
    ICourierGateway,
    INotificationService,
    IPaymentGateway,
)
from core.application.services import (
    CommissionResolver,
    CustomerRiskService,
    InventoryLedger,
    OrderApplicationService,
    OrderBuilder,
    OrderNotificationHandler,
    OrderStatusMachine,
    PricingEngine,
    RenewalBillingService,
    RenewalScheduler,
    SubscriptionService,
)
from core.application.use_cases import PlaceOrderUseCase
from core.domain.repositories import (
    CatalogRepository,
    OrderRepository,
    StockRepository,
    SubscriptionRepository,
)
from core.infrastructure.adapters.coupons import InMemoryCouponValidator
from core.infrastructure.adapters.courier import CourierAdapter
from core.infrastructure.adapters.notifications import MockNotificationService
from core.infrastructure.adapters.payments import ManualPaymentGateway
from core.infrastructure.adapters.persistence import (
    InMemoryCatalogRepository,
    InMemoryOrderRepository,
    InMemorySubscriptionRepository,
)
from core.infrastructure.config_provider import SettingsConfigProvider
from core.infrastructure.event_bus import InMemoryEventBus
from core.settings import AppSettings, get_app_settings

logger = logging.getLogger(__name__)


# =============================================================================
# CONTAINER
# =============================================================================

@dataclass
class Container:
    """Wired application graph for one process."""

    settings: AppSettings
    orders: OrderRepository
    subscriptions: SubscriptionRepository
    catalog: CatalogRepository
    stock: StockRepository
    event_bus: InMemoryEventBus
    coupon_validator: ICouponValidator
    payment_gateway: IPaymentGateway
    courier: ICourierGateway
    notification_service: INotificationService
    place_order: PlaceOrderUseCase
    order_service: OrderApplicationService
    risk_service: CustomerRiskService
    renewal_billing: RenewalBillingService
    renewal_scheduler: RenewalScheduler


def _build_repositories(settings: AppSettings):
    if settings.database.uses_sql:
        from core.data.repositories import (
            SqlAlchemyCatalogRepository,
            SqlAlchemyOrderRepository,
            SqlAlchemyStockRepository,
            SqlAlchemySubscriptionRepository,
        )
        from core.infrastructure.database.config import get_engine, get_session_factory

        session_factory = get_session_factory(get_engine(settings.database))
        logger.info("Using SQLAlchemy repositories")
        return (
            SqlAlchemyOrderRepository(session_factory),
            SqlAlchemySubscriptionRepository(session_factory),
            SqlAlchemyCatalogRepository(session_factory),
            SqlAlchemyStockRepository(session_factory),
        )

    catalog = InMemoryCatalogRepository()
    logger.info("Using in-memory repositories")
    return InMemoryOrderRepository(), InMemorySubscriptionRepository(), catalog, catalog


def _build_notification_service(settings: AppSettings) -> INotificationService:
    section = settings.notifications
    if section.webhook_enabled and section.webhook_url:
        from core.infrastructure.adapters.notifications.webhook_notification_service import (
            WebhookNotificationService,
        )

        logger.info("Created WebhookNotificationService instance")
        return WebhookNotificationService(section)

    logger.info("Using MockNotificationService (notifications disabled)")
    return MockNotificationService()


def build_container(settings: Optional[AppSettings] = None) -> Container:
    """Wire repositories, services and the renewal scheduler."""
    settings = settings or get_app_settings()
    orders, subscriptions, catalog, stock = _build_repositories(settings)

    config_provider = SettingsConfigProvider(lambda: settings)
    event_bus = InMemoryEventBus()
    notification_service = _build_notification_service(settings)
    event_bus.subscribe(OrderNotificationHandler(notification_service).handle)

    coupon_validator = InMemoryCouponValidator()
    payment_gateway = ManualPaymentGateway()
    courier = CourierAdapter(config_provider)

    resolver = CommissionResolver(config_provider)
    ledger = InventoryLedger(catalog, stock)
    risk_service = CustomerRiskService(catalog, orders)
    status_machine = OrderStatusMachine(ledger, courier)

    place_order = PlaceOrderUseCase(
        orders=orders,
        catalog=catalog,
        order_builder=OrderBuilder(catalog, resolver),
        pricing_engine=PricingEngine(coupon_validator),
        inventory_ledger=ledger,
        subscription_service=SubscriptionService(subscriptions),
        event_bus=event_bus,
        risk_service=risk_service,
        coupon_validator=coupon_validator,
        payment_gateway=payment_gateway,
    )
    renewal_billing = RenewalBillingService(subscriptions, orders, catalog, resolver, event_bus=event_bus)
    renewal_scheduler = RenewalScheduler(
        renewal_billing,
        interval_seconds=settings.renewal.interval_seconds,
        batch_size=settings.renewal.batch_size,
    )

    return Container(
        settings=settings,
        orders=orders,
        subscriptions=subscriptions,
        catalog=catalog,
        stock=stock,
        event_bus=event_bus,
        coupon_validator=coupon_validator,
        payment_gateway=payment_gateway,
        courier=courier,
        notification_service=notification_service,
        place_order=place_order,
        order_service=OrderApplicationService(orders, status_machine, courier, event_bus),
        risk_service=risk_service,
        renewal_billing=renewal_billing,
        renewal_scheduler=renewal_scheduler,
    )


# =============================================================================
# SINGLETON INSTANCE
# =============================================================================

_container: Optional[Container] = None


def get_container() -> Container:
    global _container
    if _container is None:
        _container = build_container()
        logger.info("Created application container")
    return _container


def set_container(container: Container) -> None:
    """Install a pre-built container (tests)."""
    global _container
    _container = container


# =============================================================================
# DEPENDENCIES
# =============================================================================

def get_place_order_use_case() -> PlaceOrderUseCase:
    return get_container().place_order


def get_order_service() -> OrderApplicationService:
    return get_container().order_service


def get_risk_service() -> CustomerRiskService:
    return get_container().risk_service


def get_renewal_billing() -> RenewalBillingService:
    return get_container().renewal_billing


@dataclass(frozen=True)
class Actor:
    """Caller identity as forwarded by the gateway in front of the API."""

    id: Optional[str]
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role in ("admin", "staff")


def get_actor(
    x_actor_id: Optional[str] = Header(default=None),
    x_actor_role: Optional[str] = Header(default=None),
) -> Actor:
    role = (x_actor_role or "").strip().lower() or ("customer" if x_actor_id else "guest")
    return Actor(id=(x_actor_id or "").strip() or None, role=role)


# =============================================================================
# RESET (for testing)
# =============================================================================

def reset_dependencies():
    global _container
    _container = None
    logger.info("Dependencies reset")
