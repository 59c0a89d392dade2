"""Order and OrderItem SQLAlchemy models"""

from sqlalchemy import Column, ForeignKey, Index, Numeric, String, Text
from sqlalchemy.orm import relationship

from .base import Base, TimestampMixin


class Order(Base, TimestampMixin):
    """Customer order.

    status_code follows the order state machine in
    domain.governance.status.ORDER_TRANSITIONS.
    """
    __tablename__ = "orders"
    __table_args__ = (
        Index("ix_orders_org_id", "org_id"),
    )

    id = Column(String(36), primary_key=True)
    org_id = Column(String(36), nullable=False)
    customer_id = Column(String(36), ForeignKey("customers.id", ondelete="RESTRICT"), nullable=True)
    order_number = Column(Text, nullable=True)
    status_code = Column(String(32), nullable=False, default="draft")
    total_amount = Column(Numeric(12, 2), nullable=True)
    revenue_estimate = Column(Numeric(12, 2), nullable=True)

    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")


class OrderItem(Base, TimestampMixin):
    """Line item of an order, tracked through design and manufacturing."""
    __tablename__ = "order_items"
    __table_args__ = (
        Index("ix_order_items_order_id", "order_id"),
    )

    id = Column(String(36), primary_key=True)
    org_id = Column(String(36), nullable=False)
    order_id = Column(String(36), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    status_code = Column(String(32), nullable=False, default="pending_design")
    quantity = Column(Numeric(12, 2), nullable=False, default=1)
    price_snapshot = Column(Numeric(12, 2), nullable=True)

    order = relationship("Order", back_populates="items")
    design_jobs = relationship("DesignJob", back_populates="order_item")
