"""Static lookup of evaluators by entity kind.

Built once at import time; there is no runtime registration.
"""

from types import MappingProxyType
from typing import Mapping

from .errors import UnknownEntityKindError
from .models import EntityKind
from .rules import (
    DesignJobRuleEvaluator,
    InventoryRuleEvaluator,
    ORDER_TRANSITION_GUARDS,
    OrderRuleEvaluator,
    PurchaseOrderRuleEvaluator,
    RuleEvaluator,
    StatusTransitionEvaluator,
    WorkOrderRuleEvaluator,
)
from .status import TRANSITION_TABLES


PAYLOAD_EVALUATORS: Mapping[EntityKind, RuleEvaluator] = MappingProxyType({
    EntityKind.ORDER: OrderRuleEvaluator(),
    EntityKind.DESIGN_JOB: DesignJobRuleEvaluator(),
    EntityKind.WORK_ORDER: WorkOrderRuleEvaluator(),
    EntityKind.PURCHASE_ORDER: PurchaseOrderRuleEvaluator(),
    EntityKind.INVENTORY: InventoryRuleEvaluator(),
})

TRANSITION_EVALUATORS: Mapping[EntityKind, StatusTransitionEvaluator] = MappingProxyType({
    kind: StatusTransitionEvaluator(
        kind,
        guards=ORDER_TRANSITION_GUARDS if kind is EntityKind.ORDER else None,
    )
    for kind in TRANSITION_TABLES
})


def get_payload_evaluator(kind: EntityKind) -> RuleEvaluator:
    """Return the payload evaluator for a kind.

    Raises:
        UnknownEntityKindError: If the kind has no payload rules
    """
    try:
        return PAYLOAD_EVALUATORS[kind]
    except KeyError:
        raise UnknownEntityKindError(f"No business rules registered for '{getattr(kind, 'value', kind)}'")


def get_transition_evaluator(kind: EntityKind) -> StatusTransitionEvaluator:
    """Return the status transition evaluator for a kind.

    Raises:
        UnknownEntityKindError: If the kind has no status lifecycle
    """
    try:
        return TRANSITION_EVALUATORS[kind]
    except KeyError:
        raise UnknownEntityKindError(f"No status lifecycle for '{getattr(kind, 'value', kind)}'")
