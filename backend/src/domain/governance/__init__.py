"""Lifecycle governance domain module.

Status state machines per entity kind, business rule evaluators that combine
static and data-dependent checks, and the aggregation/enforcement decision
that turns violations into block or pass.
"""

from .models import (
    Actor,
    AggregatedViolations,
    DEFAULT_POLICY,
    EnforcementPolicy,
    EnforcementResult,
    EntityKind,
    EvaluationContext,
    Violation,
    ViolationCode,
    ViolationSeverity,
)
from .errors import (
    DataAccessError,
    GovernanceError,
    StateTransitionError,
    UnknownEntityKindError,
)
from .status import (
    DesignJobStatus,
    OrderItemStatus,
    OrderStatus,
    PurchaseOrderStatus,
    WorkOrderStatus,
    TRANSITION_TABLES,
    get_allowed_transitions,
    is_terminal,
    is_valid_transition,
    validate_transition,
)
from .port import GovernanceDataPort
from .aggregator import aggregate
from .policy import decide
from .rules import RuleEvaluator, StatusTransitionEvaluator
from .registry import get_payload_evaluator, get_transition_evaluator

__all__ = [
    "Actor",
    "AggregatedViolations",
    "DEFAULT_POLICY",
    "EnforcementPolicy",
    "EnforcementResult",
    "EntityKind",
    "EvaluationContext",
    "Violation",
    "ViolationCode",
    "ViolationSeverity",
    "DataAccessError",
    "GovernanceError",
    "StateTransitionError",
    "UnknownEntityKindError",
    "DesignJobStatus",
    "OrderItemStatus",
    "OrderStatus",
    "PurchaseOrderStatus",
    "WorkOrderStatus",
    "TRANSITION_TABLES",
    "get_allowed_transitions",
    "is_terminal",
    "is_valid_transition",
    "validate_transition",
    "GovernanceDataPort",
    "aggregate",
    "decide",
    "RuleEvaluator",
    "StatusTransitionEvaluator",
    "get_payload_evaluator",
    "get_transition_evaluator",
]
