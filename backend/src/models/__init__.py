"""SQLAlchemy read models for the governance data port"""

from .base import Base
from .customer import Customer
from .order import Order, OrderItem
from .design_job import DesignJob
from .work_order import WorkOrder
from .manufacturer import Manufacturer
from .material import Material
from .purchase_order import PurchaseOrder

__all__ = [
    "Base",
    "Customer",
    "Order",
    "OrderItem",
    "DesignJob",
    "WorkOrder",
    "Manufacturer",
    "Material",
    "PurchaseOrder",
]
