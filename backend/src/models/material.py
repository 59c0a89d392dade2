"""Material SQLAlchemy model"""

from sqlalchemy import Column, Numeric, String, Text

from .base import Base, TimestampMixin


class Material(Base, TimestampMixin):
    """Stocked material with purchasing and reorder thresholds."""
    __tablename__ = "materials"

    id = Column(String(36), primary_key=True)
    name = Column(Text, nullable=False)
    moq = Column(Numeric(12, 2), nullable=True)
    reorder_level = Column(Numeric(12, 2), nullable=True)
