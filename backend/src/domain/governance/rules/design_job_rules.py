"""Design job business rules.

Rules implemented:
- INVALID_ORDER_ITEM_ORG: order item must exist and belong to the job's org
- TIGHT_DEADLINE_WARNING: deadline leaves less than twice the estimated hours
- HIGH_DESIGNER_WORKLOAD: designer already holds 10 or more active jobs

Workload is advisory only and never produces an error.
"""

from decimal import Decimal

from ..models import EntityKind, EvaluationContext, Violation, ViolationCode
from ..payloads import DesignJobPayload, as_utc
from ..status import DesignJobStatus
from .base import RuleEvaluator


DESIGNER_WORKLOAD_THRESHOLD = 10
DEADLINE_BUFFER_FACTOR = Decimal("2")
INACTIVE_DESIGN_JOB_STATUSES = frozenset({
    DesignJobStatus.APPROVED.value,
    DesignJobStatus.REJECTED.value,
    DesignJobStatus.CANCELED.value,
})


async def validate_order_item_org(job: DesignJobPayload, context: EvaluationContext) -> list[Violation]:
    if not (job.order_item_id and job.org_id):
        return []

    order_item = await context.data.get_order_item(job.order_item_id)
    if order_item is None or order_item.org_id != job.org_id:
        return [Violation.error(
            "orderItemId",
            "Order item does not belong to this organization",
            ViolationCode.INVALID_ORDER_ITEM_ORG,
        )]
    return []


async def validate_deadline(job: DesignJobPayload, context: EvaluationContext) -> list[Violation]:
    if job.deadline is None or job.estimated_hours is None:
        return []

    hours_until_deadline = Decimal(str((as_utc(job.deadline) - context.now).total_seconds())) / 3600
    if hours_until_deadline < job.estimated_hours * DEADLINE_BUFFER_FACTOR:
        return [Violation.warning(
            "deadline",
            "Deadline may not provide sufficient time for estimated work",
            ViolationCode.TIGHT_DEADLINE_WARNING,
        )]
    return []


async def validate_designer_workload(job: DesignJobPayload, context: EvaluationContext) -> list[Violation]:
    if not job.assignee_designer_id:
        return []

    jobs = await context.data.get_design_jobs_by_assignee(job.assignee_designer_id)
    active = [
        j for j in jobs
        if j.status_code not in INACTIVE_DESIGN_JOB_STATUSES and j.id != job.id
    ]

    if len(active) >= DESIGNER_WORKLOAD_THRESHOLD:
        return [Violation.warning(
            "assigneeDesignerId",
            "Designer has high workload - consider redistributing",
            ViolationCode.HIGH_DESIGNER_WORKLOAD,
        )]
    return []


class DesignJobRuleEvaluator(RuleEvaluator):
    """Business rules for design job payloads."""

    kind = EntityKind.DESIGN_JOB
    payload_model = DesignJobPayload
    system_error_message = "Unable to validate design job business rules"

    def checks(self):
        return (
            ("order_item_org", validate_order_item_org),
            ("deadline", validate_deadline),
            ("designer_workload", validate_designer_workload),
        )
