"""Manufacturing work order SQLAlchemy model"""

from sqlalchemy import Column, DateTime, ForeignKey, Index, String

from .base import Base, TimestampMixin


class WorkOrder(Base, TimestampMixin):
    """Production job for one order item at a manufacturer."""
    __tablename__ = "manufacturing_work_orders"
    __table_args__ = (
        Index("ix_work_orders_manufacturer_id", "manufacturer_id"),
    )

    id = Column(String(36), primary_key=True)
    org_id = Column(String(36), nullable=False)
    order_item_id = Column(String(36), ForeignKey("order_items.id", ondelete="RESTRICT"), nullable=True)
    manufacturer_id = Column(String(36), ForeignKey("manufacturers.id", ondelete="SET NULL"), nullable=True)
    status_code = Column(String(32), nullable=False, default="pending")
    planned_start_date = Column(DateTime(timezone=True), nullable=True)
    planned_due_date = Column(DateTime(timezone=True), nullable=True)
