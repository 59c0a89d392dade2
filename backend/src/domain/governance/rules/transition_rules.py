"""Status transition evaluation.

A status change is first checked against the kind's transition table. An
illegal move yields exactly one INVALID_STATUS_TRANSITION error and nothing
else runs, since guards for an unreachable target state would be
meaningless. Legal moves then run the guards registered for the target
status.

Order guards:
- into ``shipped``: every order item must be completed or cancelled
- into ``completed``: PAYMENT_VERIFICATION_REQUIRED warning, always raised
"""

import logging
from types import MappingProxyType
from typing import Awaitable, Callable, Mapping, Optional, Sequence

from ..models import EntityKind, EvaluationContext, Violation, ViolationCode
from ..payloads import StatusChangePayload
from ..status import OrderItemStatus, OrderStatus, StatusValue, is_valid_transition
from .base import RuleEvaluator


logger = logging.getLogger(__name__)


Guard = Callable[[str, EvaluationContext], Awaitable[list[Violation]]]

SHIPPABLE_ITEM_STATUSES = frozenset({
    OrderItemStatus.COMPLETED.value,
    OrderItemStatus.CANCELLED.value,
})


async def require_items_complete(order_id: str, context: EvaluationContext) -> list[Violation]:
    """Block shipping while any order item is still in progress."""
    items = await context.data.get_order_items_by_order(order_id)
    incomplete = [item for item in items if (item.status_code or "") not in SHIPPABLE_ITEM_STATUSES]

    if incomplete:
        return [Violation.error(
            "statusCode",
            f"Cannot ship order - {len(incomplete)} items are not completed",
            ViolationCode.INCOMPLETE_ITEMS_CANNOT_SHIP,
        )]
    return []


async def remind_payment_verification(order_id: str, context: EvaluationContext) -> list[Violation]:
    # No payment lookup exists yet; the reminder is unconditional.
    return [Violation.warning(
        "statusCode",
        "Payment verification required before marking as completed",
        ViolationCode.PAYMENT_VERIFICATION_REQUIRED,
    )]


ORDER_TRANSITION_GUARDS: Mapping[str, Sequence[Guard]] = MappingProxyType({
    OrderStatus.SHIPPED.value: (require_items_complete,),
    OrderStatus.COMPLETED.value: (remind_payment_verification,),
})


def _raw(status: Optional[StatusValue]) -> Optional[str]:
    return getattr(status, "value", status)


class StatusTransitionEvaluator(RuleEvaluator):
    """Validates status-change requests for one entity kind.

    As a RuleEvaluator it reads ``statusCode`` from the payload and the
    current status through the data port. ``evaluate_transition`` is the
    direct entry point when the caller already knows the current status.
    """

    payload_model = StatusChangePayload
    system_error_field = "statusCode"
    system_error_message = "Unable to validate status transition"

    def __init__(self, kind: EntityKind, guards: Optional[Mapping[str, Sequence[Guard]]] = None):
        self.kind = kind
        self.guards = guards or {}

    def checks(self):
        return (("status_change", self._check_status_change),)

    async def _check_status_change(self, change: StatusChangePayload, context: EvaluationContext) -> list[Violation]:
        entity_id = context.entity_id or change.id
        if not change.status_code:
            return [Violation.error(
                "statusCode",
                "Status code is required",
                ViolationCode.STATUS_CODE_REQUIRED,
            )]

        current_status = await context.data.get_entity_status(self.kind, entity_id) if entity_id else None
        if current_status is None:
            return [Violation.error(
                "id",
                f"{self.kind.value.replace('_', ' ').capitalize()} not found",
                ViolationCode.ENTITY_NOT_FOUND,
            )]

        return await self.evaluate_transition(entity_id, current_status, change.status_code, context)

    async def evaluate_transition(
        self,
        entity_id: str,
        current_status: StatusValue,
        new_status: StatusValue,
        context: EvaluationContext
    ) -> list[Violation]:
        """Validate moving an entity from ``current_status`` to ``new_status``.

        Args:
            entity_id: Entity being changed
            current_status: Status currently persisted
            new_status: Requested status
            context: Evaluation context with data port

        Returns:
            Violations; a single INVALID_STATUS_TRANSITION when the move is illegal
        """
        current, new = _raw(current_status), _raw(new_status)

        if not is_valid_transition(self.kind, current, new):
            return [Violation.error(
                "statusCode",
                f"Cannot transition from '{current}' to '{new}'",
                ViolationCode.INVALID_STATUS_TRANSITION,
            )]

        if current == new:
            return []

        violations: list[Violation] = []
        try:
            for guard in self.guards.get(new, ()):
                violations.extend(await guard(entity_id, context))
        except Exception as e:
            logger.error(
                f"Status transition guard failed for {self.kind.value} {entity_id} "
                f"({current} -> {new}): {e}",
                exc_info=True
            )
            violations.append(self.system_error())

        return violations
