"""DesignJob SQLAlchemy model"""

from sqlalchemy import Column, DateTime, ForeignKey, Index, Numeric, String
from sqlalchemy.orm import relationship

from .base import Base, TimestampMixin


class DesignJob(Base, TimestampMixin):
    """Design work for one order item, assigned to a designer."""
    __tablename__ = "design_jobs"
    __table_args__ = (
        Index("ix_design_jobs_assignee", "assignee_designer_id"),
        Index("ix_design_jobs_order_item_id", "order_item_id"),
    )

    id = Column(String(36), primary_key=True)
    org_id = Column(String(36), nullable=False)
    order_item_id = Column(String(36), ForeignKey("order_items.id", ondelete="CASCADE"), nullable=True)
    assignee_designer_id = Column(String(36), nullable=True)
    status_code = Column(String(32), nullable=False, default="queued")
    deadline = Column(DateTime(timezone=True), nullable=True)
    estimated_hours = Column(Numeric(8, 2), nullable=True)

    order_item = relationship("OrderItem", back_populates="design_jobs")
