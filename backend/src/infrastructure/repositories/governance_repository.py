"""Governance repository: SQLAlchemy implementation of GovernanceDataPort.

Queries run on a synchronous Session, dispatched to Starlette's threadpool
so the async evaluators never block the event loop. The repository only
reads: it never adds, flushes or commits.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload
from starlette.concurrency import run_in_threadpool

from domain.governance.errors import DataAccessError
from domain.governance.models import EntityKind
from domain.governance.port import (
    CustomerRecord,
    DesignJobRecord,
    GovernanceDataPort,
    ManufacturerRecord,
    MaterialRecord,
    OrderItemRecord,
    WorkOrderRecord,
)
from models import Customer, DesignJob, Manufacturer, Material, Order, OrderItem, PurchaseOrder, WorkOrder


STATUS_MODELS = {
    EntityKind.ORDER: Order,
    EntityKind.ORDER_ITEM: OrderItem,
    EntityKind.WORK_ORDER: WorkOrder,
    EntityKind.DESIGN_JOB: DesignJob,
    EntityKind.PURCHASE_ORDER: PurchaseOrder,
}


def _design_job_record(job: DesignJob) -> DesignJobRecord:
    return DesignJobRecord(
        id=job.id,
        status_code=job.status_code,
        order_item_id=job.order_item_id,
        assignee_designer_id=job.assignee_designer_id,
    )


def _order_item_record(item: OrderItem, with_design_jobs: bool = False) -> OrderItemRecord:
    return OrderItemRecord(
        id=item.id,
        order_id=item.order_id,
        org_id=item.org_id,
        status_code=item.status_code,
        design_jobs=tuple(_design_job_record(j) for j in item.design_jobs) if with_design_jobs else (),
    )


class SqlAlchemyGovernanceRepository(GovernanceDataPort):
    """Read-only data port backed by a SQLAlchemy session."""

    def __init__(self, db: Session):
        """Initialize repository with database session.

        Args:
            db: SQLAlchemy database session, owned by the caller
        """
        self.db = db

    async def _read(self, query: Callable[[], object]):
        try:
            return await run_in_threadpool(query)
        except SQLAlchemyError as e:
            raise DataAccessError(f"Governance lookup failed: {e}") from e

    async def get_customer(self, customer_id: str) -> Optional[CustomerRecord]:
        def query():
            customer = self.db.get(Customer, customer_id)
            return CustomerRecord(id=customer.id, org_id=customer.org_id) if customer else None
        return await self._read(query)

    async def get_entity_status(self, kind: EntityKind, entity_id: str) -> Optional[str]:
        model = STATUS_MODELS.get(kind)
        if model is None:
            return None

        def query():
            return self.db.execute(
                select(model.status_code).where(model.id == entity_id)
            ).scalar_one_or_none()
        return await self._read(query)

    async def get_order_items_by_order(self, order_id: str) -> list[OrderItemRecord]:
        def query():
            items = self.db.execute(
                select(OrderItem).where(OrderItem.order_id == order_id)
            ).scalars().all()
            return [_order_item_record(item) for item in items]
        return await self._read(query)

    async def get_order_item(self, order_item_id: str) -> Optional[OrderItemRecord]:
        def query():
            item = self.db.execute(
                select(OrderItem)
                .options(selectinload(OrderItem.design_jobs))
                .where(OrderItem.id == order_item_id)
            ).scalar_one_or_none()
            return _order_item_record(item, with_design_jobs=True) if item else None
        return await self._read(query)

    async def get_design_jobs_by_assignee(self, designer_id: str) -> list[DesignJobRecord]:
        def query():
            jobs = self.db.execute(
                select(DesignJob).where(DesignJob.assignee_designer_id == designer_id)
            ).scalars().all()
            return [_design_job_record(job) for job in jobs]
        return await self._read(query)

    async def get_work_orders_by_manufacturer(self, manufacturer_id: str) -> list[WorkOrderRecord]:
        def query():
            work_orders = self.db.execute(
                select(WorkOrder).where(WorkOrder.manufacturer_id == manufacturer_id)
            ).scalars().all()
            return [
                WorkOrderRecord(
                    id=wo.id,
                    status_code=wo.status_code,
                    manufacturer_id=wo.manufacturer_id,
                    order_item_id=wo.order_item_id,
                )
                for wo in work_orders
            ]
        return await self._read(query)

    async def get_manufacturer(self, manufacturer_id: str) -> Optional[ManufacturerRecord]:
        def query():
            manufacturer = self.db.get(Manufacturer, manufacturer_id)
            if manufacturer is None:
                return None
            return ManufacturerRecord(id=manufacturer.id, is_active=bool(manufacturer.is_active))
        return await self._read(query)

    async def get_material(self, material_id: str) -> Optional[MaterialRecord]:
        def query():
            material = self.db.get(Material, material_id)
            if material is None:
                return None
            return MaterialRecord(id=material.id, moq=material.moq, reorder_level=material.reorder_level)
        return await self._read(query)


def sqlalchemy_port_scope(session_factory: Callable[[], Session]):
    """Build a per-request port scope over a session factory.

    Each scope opens its own session and closes it when the evaluation ends.

    Usage:
        port_scope = sqlalchemy_port_scope(SessionLocal)
        async with port_scope() as port:
            customer = await port.get_customer(customer_id)
    """
    @asynccontextmanager
    async def scope() -> AsyncIterator[GovernanceDataPort]:
        session = session_factory()
        try:
            yield SqlAlchemyGovernanceRepository(session)
        finally:
            await run_in_threadpool(session.close)

    return scope
