"""SQLAlchemy ORM models for Order aggregate."""

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from .base import Base


class OrderModel(Base):
    """SQLAlchemy ORM model for orders table."""

    __tablename__ = "orders"

    order_number = Column(String(40), primary_key=True)
    user_id = Column(String(64), nullable=True, index=True)
    customer_email = Column(String(255), nullable=False, default="", index=True)
    customer_phone = Column(String(40), nullable=False, default="", index=True)
    shipping_address = Column(JSON, nullable=False)
    payment_method = Column(String(50), nullable=False)
    payment_details = Column(JSON, nullable=False)
    subtotal = Column(Numeric(12, 2), nullable=False)
    shipping_fee = Column(Numeric(12, 2), nullable=False)
    discount = Column(Numeric(12, 2), nullable=False)
    total = Column(Numeric(12, 2), nullable=False)
    coupon_code = Column(String(50), nullable=True)
    order_status = Column(String(20), nullable=False, default="pending", index=True)
    payment_status = Column(String(20), nullable=False, default="pending")
    status_timeline = Column(JSON, nullable=False, default=list)
    shipping_meta = Column(JSON, nullable=False, default=dict)
    source_channel = Column(String(30), nullable=False, default="web")
    landing_page_id = Column(String(64), nullable=True)
    created_by = Column(String(64), nullable=True)
    notes = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    # Relationship to items
    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.position",
        lazy="selectin",
    )


class OrderItemModel(Base):
    """SQLAlchemy ORM model for order_items table."""

    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_number = Column(
        String(40), ForeignKey("orders.order_number", ondelete="CASCADE"), nullable=False, index=True
    )
    position = Column(Integer, nullable=False, default=0)
    product_id = Column(String(64), nullable=False)
    title = Column(String(500), nullable=False, default="")
    vendor_id = Column(String(64), nullable=True)
    category_id = Column(String(64), nullable=True)
    variation_id = Column(String(64), nullable=True)
    variation_label = Column(String(200), nullable=True)
    sku = Column(String(100), nullable=True)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(12, 2), nullable=False)
    commission = Column(JSON, nullable=False)

    # Relationship back to order
    order = relationship("OrderModel", back_populates="items")
