"""Manufacturing work order business rules.

Rules implemented:
- ORDER_ITEM_NOT_FOUND / DESIGN_NOT_APPROVED: production needs an approved design
- HIGH_MANUFACTURER_WORKLOAD: manufacturer already holds 20 or more active work orders
- INSUFFICIENT_MANUFACTURING_TIME: planned window shorter than one day
"""

from datetime import timedelta

from ..models import EntityKind, EvaluationContext, Violation, ViolationCode
from ..payloads import WorkOrderPayload, as_utc
from ..status import DesignJobStatus, WorkOrderStatus
from .base import RuleEvaluator


MANUFACTURER_WORKLOAD_THRESHOLD = 20
MIN_MANUFACTURING_WINDOW = timedelta(days=1)
INACTIVE_WORK_ORDER_STATUSES = frozenset({
    WorkOrderStatus.COMPLETED.value,
    WorkOrderStatus.SHIPPED.value,
    WorkOrderStatus.CANCELLED.value,
})


async def validate_approved_design(work_order: WorkOrderPayload, context: EvaluationContext) -> list[Violation]:
    if not work_order.order_item_id:
        return []

    order_item = await context.data.get_order_item(work_order.order_item_id)
    if order_item is None:
        return [Violation.error(
            "orderItemId",
            "Order item not found",
            ViolationCode.ORDER_ITEM_NOT_FOUND,
        )]

    if not any(job.status_code == DesignJobStatus.APPROVED.value for job in order_item.design_jobs):
        return [Violation.error(
            "orderItemId",
            "Cannot create work order - design not yet approved",
            ViolationCode.DESIGN_NOT_APPROVED,
        )]
    return []


async def validate_manufacturer_workload(work_order: WorkOrderPayload, context: EvaluationContext) -> list[Violation]:
    if not work_order.manufacturer_id:
        return []

    work_orders = await context.data.get_work_orders_by_manufacturer(work_order.manufacturer_id)
    active = [
        wo for wo in work_orders
        if wo.status_code not in INACTIVE_WORK_ORDER_STATUSES and wo.id != work_order.id
    ]

    if len(active) >= MANUFACTURER_WORKLOAD_THRESHOLD:
        return [Violation.warning(
            "manufacturerId",
            "Manufacturer has high workload - may cause delays",
            ViolationCode.HIGH_MANUFACTURER_WORKLOAD,
        )]
    return []


async def validate_planned_dates(work_order: WorkOrderPayload, context: EvaluationContext) -> list[Violation]:
    if work_order.planned_start_date is None or work_order.planned_due_date is None:
        return []

    window = as_utc(work_order.planned_due_date) - as_utc(work_order.planned_start_date)
    if window < MIN_MANUFACTURING_WINDOW:
        return [Violation.error(
            "plannedDueDate",
            "Manufacturing period is too short",
            ViolationCode.INSUFFICIENT_MANUFACTURING_TIME,
        )]
    return []


class WorkOrderRuleEvaluator(RuleEvaluator):
    """Business rules for manufacturing work order payloads."""

    kind = EntityKind.WORK_ORDER
    payload_model = WorkOrderPayload
    system_error_message = "Unable to validate work order business rules"

    def checks(self):
        return (
            ("approved_design", validate_approved_design),
            ("manufacturer_workload", validate_manufacturer_workload),
            ("planned_dates", validate_planned_dates),
        )
