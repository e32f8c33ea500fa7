"""
Modelos relacionados con órdenes/pedidos
"""
from sqlalchemy import DECIMAL, JSON, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from store_admin.core.database import Base
from store_admin.models.common import new_id, utcnow


class Customer(Base):
    __tablename__ = "customers"

    id = Column(String(36), primary_key=True, default=new_id)
    store_id = Column(String(36), ForeignKey("stores.id", ondelete="CASCADE"), nullable=False, index=True)

    email = Column(String(255), nullable=False, index=True)
    first_name = Column(String(100))
    last_name = Column(String(100))
    phone = Column(String(50))

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    store = relationship("Store", back_populates="customers")
    orders = relationship("Order", back_populates="customer")


class Order(Base):
    """
    Órdenes de la tienda

    Estados:
        status: open | closed | cancelled | completed
        financial_status: pending | paid | refunded | ...
        fulfillment_status: unfulfilled | partial | fulfilled
    """
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=new_id)
    store_id = Column(String(36), ForeignKey("stores.id", ondelete="CASCADE"), nullable=False, index=True)
    customer_id = Column(String(36), ForeignKey("customers.id", ondelete="SET NULL"), index=True)

    # Identificación
    order_number = Column(String(100), nullable=False, index=True)
    customer_email = Column(String(255), index=True)
    customer_name = Column(String(255))
    customer_phone = Column(String(50))
    currency = Column(String(3), default="USD")

    # Estados
    status = Column(String(50), default="open", index=True)
    financial_status = Column(String(50), default="pending", index=True)
    fulfillment_status = Column(String(50), default="unfulfilled", index=True)

    # Montos
    subtotal_price = Column(DECIMAL(12, 2), default=0)
    total_tax = Column(DECIMAL(12, 2), default=0)
    total_shipping = Column(DECIMAL(12, 2), default=0)
    total_discount = Column(DECIMAL(12, 2), default=0)
    total_price = Column(DECIMAL(12, 2), nullable=False, default=0)

    # Direcciones y envío
    shipping_address = Column(JSON)
    billing_address = Column(JSON)
    shipping_lines = Column(JSON)

    # Notas
    tags = Column(JSON, default=list)
    note = Column(Text)

    # Cancelación
    cancel_reason = Column(String(100))
    cancelled_at = Column(DateTime(timezone=True))

    # Metadata
    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Relationships
    store = relationship("Store", back_populates="orders")
    customer = relationship("Customer", back_populates="orders")
    line_items = relationship(
        "OrderLineItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderLineItem.position",
    )


class OrderLineItem(Base):
    """
    Items/productos de cada orden
    """
    __tablename__ = "order_line_items"

    id = Column(String(36), primary_key=True, default=new_id)
    order_id = Column(String(36), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(String(36), ForeignKey("products.id", ondelete="SET NULL"), index=True)
    variant_id = Column(String(36), ForeignKey("product_variants.id", ondelete="SET NULL"))

    sku = Column(String(100))
    title = Column(String(255), nullable=False)
    variant_title = Column(String(255))
    quantity = Column(Integer, nullable=False)
    price = Column(DECIMAL(12, 2), nullable=False)
    total_price = Column(DECIMAL(12, 2), nullable=False)
    position = Column(Integer, default=1)

    created_at = Column(DateTime(timezone=True), default=utcnow)

    order = relationship("Order", back_populates="line_items")
