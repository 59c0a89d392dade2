"""Customer SQLAlchemy model"""

from sqlalchemy import Boolean, Column, Index, String, Text

from .base import Base, TimestampMixin


class Customer(Base, TimestampMixin):
    """Customer of an organization.

    The governance engine only reads org membership, to check that an order's
    customer belongs to the order's organization.
    """
    __tablename__ = "customers"
    __table_args__ = (
        Index("ix_customers_org_id", "org_id"),
    )

    id = Column(String(36), primary_key=True)
    org_id = Column(String(36), nullable=False)
    name = Column(Text, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
