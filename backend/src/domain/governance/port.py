"""GovernanceDataPort interface (hexagonal architecture).

The rule evaluators read related entities through this port only. It is
read-only by contract: implementations must never write, flush or commit.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from .models import EntityKind


@dataclass(frozen=True)
class CustomerRecord:
    id: str
    org_id: str


@dataclass(frozen=True)
class DesignJobRecord:
    id: str
    status_code: str
    order_item_id: Optional[str] = None
    assignee_designer_id: Optional[str] = None


@dataclass(frozen=True)
class OrderItemRecord:
    id: str
    order_id: str
    org_id: str
    status_code: str
    design_jobs: tuple[DesignJobRecord, ...] = ()


@dataclass(frozen=True)
class WorkOrderRecord:
    id: str
    status_code: str
    manufacturer_id: Optional[str] = None
    order_item_id: Optional[str] = None


@dataclass(frozen=True)
class ManufacturerRecord:
    id: str
    is_active: bool


@dataclass(frozen=True)
class MaterialRecord:
    id: str
    moq: Optional[Decimal] = None
    reorder_level: Optional[Decimal] = None


class GovernanceDataPort(ABC):
    """Port interface for the read-only lookups business rules depend on."""

    @abstractmethod
    async def get_customer(self, customer_id: str) -> Optional[CustomerRecord]:
        """Fetch a customer by id, or None if it does not exist."""
        pass

    @abstractmethod
    async def get_entity_status(self, kind: EntityKind, entity_id: str) -> Optional[str]:
        """Fetch the current status code of an entity, or None if it does not exist."""
        pass

    @abstractmethod
    async def get_order_items_by_order(self, order_id: str) -> list[OrderItemRecord]:
        """Fetch all items belonging to an order."""
        pass

    @abstractmethod
    async def get_order_item(self, order_item_id: str) -> Optional[OrderItemRecord]:
        """Fetch an order item with its design jobs, or None."""
        pass

    @abstractmethod
    async def get_design_jobs_by_assignee(self, designer_id: str) -> list[DesignJobRecord]:
        """Fetch every design job assigned to a designer, any status."""
        pass

    @abstractmethod
    async def get_work_orders_by_manufacturer(self, manufacturer_id: str) -> list[WorkOrderRecord]:
        """Fetch every work order assigned to a manufacturer, any status."""
        pass

    @abstractmethod
    async def get_manufacturer(self, manufacturer_id: str) -> Optional[ManufacturerRecord]:
        """Fetch a manufacturer (supplier) by id, or None."""
        pass

    @abstractmethod
    async def get_material(self, material_id: str) -> Optional[MaterialRecord]:
        """Fetch a material by id, or None."""
        pass
