"""PurchaseOrder SQLAlchemy model"""

from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String

from .base import Base, TimestampMixin


class PurchaseOrder(Base, TimestampMixin):
    """Purchase order placed with a supplier."""
    __tablename__ = "purchase_orders"

    id = Column(String(36), primary_key=True)
    org_id = Column(String(36), nullable=False)
    supplier_id = Column(String(36), ForeignKey("manufacturers.id", ondelete="RESTRICT"), nullable=True)
    status_code = Column(String(32), nullable=False, default="draft")
    total_amount = Column(Numeric(12, 2), nullable=True)
    order_date = Column(DateTime(timezone=True), nullable=True)
    expected_delivery_date = Column(DateTime(timezone=True), nullable=True)
