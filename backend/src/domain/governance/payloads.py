"""Candidate payload schemas for the rule evaluators.

Payloads arrive as camelCase JSON (``customerId``, ``totalAmount``) and may be
partial: every field is optional and each check only runs when the fields it
needs are present. Unknown fields are kept so downstream handlers see the
full body.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class GovernancePayload(BaseModel):
    """Base for all candidate entity payloads."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        frozen=True,
    )

    id: Optional[str] = None
    org_id: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def coerce_identifiers(cls, v, info):
        """Accept UUIDs and integers for *_id fields"""
        if info.field_name == "id" or info.field_name.endswith("_id"):
            if v is not None and not isinstance(v, str):
                return str(v)
        return v


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so they compare with the evaluation clock"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class OrderItemPayload(GovernancePayload):
    quantity: Optional[Decimal] = None
    price_snapshot: Optional[Decimal] = None
    status_code: Optional[str] = None


class OrderPayload(GovernancePayload):
    customer_id: Optional[str] = None
    items: Optional[list[OrderItemPayload]] = None
    total_amount: Optional[Decimal] = None
    revenue_estimate: Optional[Decimal] = None
    due_date: Optional[datetime] = None
    status_code: Optional[str] = None


class DesignJobPayload(GovernancePayload):
    order_item_id: Optional[str] = None
    assignee_designer_id: Optional[str] = None
    deadline: Optional[datetime] = None
    estimated_hours: Optional[Decimal] = None
    status_code: Optional[str] = None


class WorkOrderPayload(GovernancePayload):
    order_item_id: Optional[str] = None
    manufacturer_id: Optional[str] = None
    planned_start_date: Optional[datetime] = None
    planned_due_date: Optional[datetime] = None
    status_code: Optional[str] = None


class PurchaseOrderItemPayload(GovernancePayload):
    material_id: Optional[str] = None
    quantity: Optional[Decimal] = None


class PurchaseOrderPayload(GovernancePayload):
    supplier_id: Optional[str] = None
    total_amount: Optional[Decimal] = None
    approval_threshold: Optional[Decimal] = Field(None, description="Defaults to 1000 when absent")
    items: Optional[list[PurchaseOrderItemPayload]] = None
    order_date: Optional[datetime] = None
    expected_delivery_date: Optional[datetime] = None
    status_code: Optional[str] = None


class InventoryPayload(GovernancePayload):
    material_id: Optional[str] = None
    quantity_on_hand: Optional[Decimal] = None


class StatusChangePayload(GovernancePayload):
    status_code: Optional[str] = None

    @field_validator("status_code", mode="before")
    @classmethod
    def strip_status(cls, v):
        """Strip whitespace; blank means absent"""
        if isinstance(v, str):
            return v.strip() or None
        return v
