"""SQLAlchemy ORM models for catalog data used by settlement."""

from sqlalchemy import JSON, Boolean, Column, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from .base import Base


class ProductModel(Base):
    """SQLAlchemy ORM model for products table."""

    __tablename__ = "products"

    id = Column(String(64), primary_key=True)
    title = Column(String(500), nullable=False)
    price = Column(Numeric(12, 2), nullable=True)
    sale_price = Column(Numeric(12, 2), nullable=True)
    price_type = Column(String(20), nullable=False, default="fixed")
    marketplace_type = Column(String(20), nullable=False, default="simple")
    approval_status = Column(String(20), nullable=True, default="approved")
    is_active = Column(Boolean, nullable=False, default=True)
    stock = Column(Integer, nullable=False, default=0)
    allow_backorder = Column(Boolean, nullable=False, default=False)
    sku = Column(String(100), nullable=True)
    vendor_id = Column(String(64), nullable=True, index=True)
    category_id = Column(String(64), nullable=True, index=True)
    commission_type = Column(String(20), nullable=False, default="inherit")
    commission_value = Column(Numeric(8, 2), nullable=False, default=0)
    commission_fixed = Column(Numeric(12, 2), nullable=False, default=0)
    recurring = Column(JSON, nullable=True)

    variations = relationship(
        "ProductVariationModel",
        back_populates="product",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class ProductVariationModel(Base):
    """SQLAlchemy ORM model for product_variations table."""

    __tablename__ = "product_variations"

    id = Column(String(64), primary_key=True)
    product_id = Column(
        String(64), ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True
    )
    label = Column(String(200), nullable=False, default="")
    sku = Column(String(100), nullable=True)
    price = Column(Numeric(12, 2), nullable=True)
    sale_price = Column(Numeric(12, 2), nullable=True)
    stock = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    product = relationship("ProductModel", back_populates="variations")


class VendorModel(Base):
    """SQLAlchemy ORM model for vendors table."""

    __tablename__ = "vendors"

    id = Column(String(64), primary_key=True)
    store_name = Column(String(200), nullable=False)
    status = Column(String(20), nullable=False, default="approved")
    vacation_mode = Column(Boolean, nullable=False, default=False)
    commission_type = Column(String(20), nullable=False, default="inherit")
    commission_value = Column(Numeric(8, 2), nullable=False, default=0)
    commission_fixed = Column(Numeric(12, 2), nullable=False, default=0)


class CategoryModel(Base):
    """SQLAlchemy ORM model for categories table."""

    __tablename__ = "categories"

    id = Column(String(64), primary_key=True)
    name = Column(String(200), nullable=False)
    commission_type = Column(String(20), nullable=False, default="inherit")
    commission_value = Column(Numeric(8, 2), nullable=False, default=0)
    commission_fixed = Column(Numeric(12, 2), nullable=False, default=0)


class CustomerModel(Base):
    """SQLAlchemy ORM model for customers table."""

    __tablename__ = "customers"

    id = Column(String(64), primary_key=True)
    name = Column(String(200), nullable=False, default="")
    email = Column(String(255), nullable=True, index=True)
    phone = Column(String(40), nullable=True, index=True)
    is_blacklisted = Column(Boolean, nullable=False, default=False)
    blacklist_reason = Column(String(500), nullable=True)
