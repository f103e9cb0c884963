"""SQLAlchemy ORM model for Subscription aggregate."""

from sqlalchemy import JSON, Column, DateTime, Index, Integer, Numeric, String

from .base import Base


class SubscriptionModel(Base):
    """SQLAlchemy ORM model for subscriptions table."""

    __tablename__ = "subscriptions"
    __table_args__ = (Index("ix_subscriptions_due", "status", "next_billing_at"),)

    id = Column(String(64), primary_key=True)
    subscription_number = Column(String(40), nullable=False, unique=True)
    source_order_number = Column(String(40), nullable=False, index=True)
    source_item_key = Column(String(80), nullable=False, unique=True)
    product_id = Column(String(64), nullable=False)
    product_title = Column(String(500), nullable=False, default="")
    vendor_id = Column(String(64), nullable=True)
    variation_id = Column(String(64), nullable=True)
    variation_label = Column(String(200), nullable=True)
    user_id = Column(String(64), nullable=True, index=True)
    guest_email = Column(String(255), nullable=True)
    quantity = Column(Integer, nullable=False, default=1)
    unit_price = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="BDT")
    interval = Column(String(20), nullable=False)
    interval_count = Column(Integer, nullable=False, default=1)
    total_cycles = Column(Integer, nullable=False, default=0)
    completed_cycles = Column(Integer, nullable=False, default=0)
    trial_days = Column(Integer, nullable=False, default=0)
    starts_at = Column(DateTime, nullable=False)
    next_billing_at = Column(DateTime, nullable=True)
    last_billed_at = Column(DateTime, nullable=True)
    status = Column(String(20), nullable=False, default="active")
    payment_method = Column(String(50), nullable=False, default="")
    shipping_address = Column(JSON, nullable=True)
    renewal_history = Column(JSON, nullable=False, default=list)
