"""Manufacturer SQLAlchemy model"""

from sqlalchemy import Boolean, Column, String, Text

from .base import Base, TimestampMixin


class Manufacturer(Base, TimestampMixin):
    """Manufacturer or supplier. Purchase orders reference it as supplier_id."""
    __tablename__ = "manufacturers"

    id = Column(String(36), primary_key=True)
    name = Column(Text, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
