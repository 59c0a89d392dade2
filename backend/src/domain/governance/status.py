"""Status state machines for governed entity kinds.

Each entity kind owns a closed status enum and a static transition table
mapping a status to the statuses reachable in exactly one step. Terminal
statuses map to an empty set. A self-transition (``from == to``) is always
allowed and represents a no-op update.

Order flow:
    draft → pending → confirmed → processing → shipped → delivered → completed
    processing ⇄ on_hold, cancellation allowed up to processing/on_hold

Work order flow:
    pending → queued → in_production → quality_check → packaging → completed → shipped
    rework loops back to quality_check, on_hold resumes to queued/in_production

Terminal states: order completed/cancelled, work order shipped/cancelled,
design job approved/canceled, purchase order completed/cancelled,
order item completed/cancelled.

Tables are immutable module constants; only a code change adds a status or
transition.
"""

from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Type, Union

from .errors import StateTransitionError, UnknownEntityKindError
from .models import EntityKind


class OrderStatus(str, Enum):
    """Order status enumeration."""
    DRAFT = "draft"
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    ON_HOLD = "on_hold"


class OrderItemStatus(str, Enum):
    """Order item status enumeration."""
    PENDING_DESIGN = "pending_design"
    DESIGN_IN_PROGRESS = "design_in_progress"
    DESIGN_APPROVED = "design_approved"
    PENDING_MANUFACTURING = "pending_manufacturing"
    IN_PRODUCTION = "in_production"
    QUALITY_CHECK = "quality_check"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class WorkOrderStatus(str, Enum):
    """Manufacturing work order status enumeration."""
    PENDING = "pending"
    QUEUED = "queued"
    IN_PRODUCTION = "in_production"
    QUALITY_CHECK = "quality_check"
    REWORK = "rework"
    PACKAGING = "packaging"
    COMPLETED = "completed"
    SHIPPED = "shipped"
    CANCELLED = "cancelled"
    ON_HOLD = "on_hold"


class DesignJobStatus(str, Enum):
    """Design job status enumeration."""
    QUEUED = "queued"
    ASSIGNED = "assigned"
    DRAFTING = "drafting"
    SUBMITTED_FOR_REVIEW = "submitted_for_review"
    UNDER_REVIEW = "under_review"
    REVISION_REQUESTED = "revision_requested"
    REVIEW = "review"  # Legacy status, kept for existing rows
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELED = "canceled"


class PurchaseOrderStatus(str, Enum):
    """Purchase order status enumeration."""
    DRAFT = "draft"
    PENDING_APPROVAL = "pending_approval"
    APPROVED = "approved"
    SENT = "sent"
    ACKNOWLEDGED = "acknowledged"
    IN_PRODUCTION = "in_production"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    RECEIVED = "received"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    ON_HOLD = "on_hold"
    REJECTED = "rejected"


StatusValue = Union[Enum, str]


def _freeze(table: dict) -> Mapping:
    return MappingProxyType({status: frozenset(targets) for status, targets in table.items()})


ORDER_TRANSITIONS = _freeze({
    OrderStatus.DRAFT: {OrderStatus.PENDING, OrderStatus.CANCELLED},
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {
        OrderStatus.SHIPPED,
        OrderStatus.CANCELLED,
        OrderStatus.ON_HOLD,
    },
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: {OrderStatus.COMPLETED},
    OrderStatus.COMPLETED: set(),  # Terminal state
    OrderStatus.CANCELLED: set(),  # Terminal state
    OrderStatus.ON_HOLD: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
})

ORDER_ITEM_TRANSITIONS = _freeze({
    OrderItemStatus.PENDING_DESIGN: {
        OrderItemStatus.DESIGN_IN_PROGRESS,
        OrderItemStatus.CANCELLED,
    },
    OrderItemStatus.DESIGN_IN_PROGRESS: {
        OrderItemStatus.DESIGN_APPROVED,
        OrderItemStatus.PENDING_DESIGN,
        OrderItemStatus.CANCELLED,
    },
    OrderItemStatus.DESIGN_APPROVED: {
        OrderItemStatus.PENDING_MANUFACTURING,
        OrderItemStatus.CANCELLED,
    },
    OrderItemStatus.PENDING_MANUFACTURING: {
        OrderItemStatus.IN_PRODUCTION,
        OrderItemStatus.CANCELLED,
    },
    OrderItemStatus.IN_PRODUCTION: {
        OrderItemStatus.QUALITY_CHECK,
        OrderItemStatus.CANCELLED,
    },
    OrderItemStatus.QUALITY_CHECK: {
        OrderItemStatus.COMPLETED,
        OrderItemStatus.IN_PRODUCTION,
        OrderItemStatus.CANCELLED,
    },
    OrderItemStatus.COMPLETED: set(),  # Terminal state
    OrderItemStatus.CANCELLED: set(),  # Terminal state
})

WORK_ORDER_TRANSITIONS = _freeze({
    WorkOrderStatus.PENDING: {WorkOrderStatus.QUEUED, WorkOrderStatus.CANCELLED},
    WorkOrderStatus.QUEUED: {
        WorkOrderStatus.IN_PRODUCTION,
        WorkOrderStatus.ON_HOLD,
        WorkOrderStatus.CANCELLED,
    },
    WorkOrderStatus.IN_PRODUCTION: {
        WorkOrderStatus.QUALITY_CHECK,
        WorkOrderStatus.REWORK,
        WorkOrderStatus.ON_HOLD,
        WorkOrderStatus.CANCELLED,
    },
    WorkOrderStatus.QUALITY_CHECK: {
        WorkOrderStatus.PACKAGING,
        WorkOrderStatus.REWORK,
        WorkOrderStatus.COMPLETED,
        WorkOrderStatus.CANCELLED,
    },
    WorkOrderStatus.REWORK: {WorkOrderStatus.QUALITY_CHECK, WorkOrderStatus.CANCELLED},
    WorkOrderStatus.PACKAGING: {WorkOrderStatus.COMPLETED, WorkOrderStatus.CANCELLED},
    WorkOrderStatus.COMPLETED: {WorkOrderStatus.SHIPPED},
    WorkOrderStatus.SHIPPED: set(),  # Terminal state
    WorkOrderStatus.CANCELLED: set(),  # Terminal state
    WorkOrderStatus.ON_HOLD: {
        WorkOrderStatus.QUEUED,
        WorkOrderStatus.IN_PRODUCTION,
        WorkOrderStatus.CANCELLED,
    },
})

DESIGN_JOB_TRANSITIONS = _freeze({
    DesignJobStatus.QUEUED: {DesignJobStatus.ASSIGNED, DesignJobStatus.CANCELED},
    DesignJobStatus.ASSIGNED: {
        DesignJobStatus.DRAFTING,
        DesignJobStatus.QUEUED,
        DesignJobStatus.CANCELED,
    },
    DesignJobStatus.DRAFTING: {
        DesignJobStatus.SUBMITTED_FOR_REVIEW,
        DesignJobStatus.ASSIGNED,
        DesignJobStatus.CANCELED,
    },
    DesignJobStatus.SUBMITTED_FOR_REVIEW: {
        DesignJobStatus.UNDER_REVIEW,
        DesignJobStatus.DRAFTING,
    },
    DesignJobStatus.UNDER_REVIEW: {
        DesignJobStatus.APPROVED,
        DesignJobStatus.REVISION_REQUESTED,
        DesignJobStatus.REJECTED,
    },
    DesignJobStatus.REVISION_REQUESTED: {
        DesignJobStatus.DRAFTING,
        DesignJobStatus.CANCELED,
    },
    DesignJobStatus.REVIEW: {
        DesignJobStatus.APPROVED,
        DesignJobStatus.REVISION_REQUESTED,
        DesignJobStatus.REJECTED,
    },
    DesignJobStatus.APPROVED: set(),  # Terminal state
    DesignJobStatus.REJECTED: {DesignJobStatus.QUEUED, DesignJobStatus.CANCELED},
    DesignJobStatus.CANCELED: set(),  # Terminal state
})

PURCHASE_ORDER_TRANSITIONS = _freeze({
    PurchaseOrderStatus.DRAFT: {
        PurchaseOrderStatus.PENDING_APPROVAL,
        PurchaseOrderStatus.APPROVED,
        PurchaseOrderStatus.CANCELLED,
    },
    PurchaseOrderStatus.PENDING_APPROVAL: {
        PurchaseOrderStatus.APPROVED,
        PurchaseOrderStatus.REJECTED,
        PurchaseOrderStatus.CANCELLED,
    },
    PurchaseOrderStatus.APPROVED: {PurchaseOrderStatus.SENT, PurchaseOrderStatus.CANCELLED},
    PurchaseOrderStatus.SENT: {
        PurchaseOrderStatus.ACKNOWLEDGED,
        PurchaseOrderStatus.CANCELLED,
        PurchaseOrderStatus.ON_HOLD,
    },
    PurchaseOrderStatus.ACKNOWLEDGED: {
        PurchaseOrderStatus.IN_PRODUCTION,
        PurchaseOrderStatus.CANCELLED,
        PurchaseOrderStatus.ON_HOLD,
    },
    PurchaseOrderStatus.IN_PRODUCTION: {
        PurchaseOrderStatus.SHIPPED,
        PurchaseOrderStatus.CANCELLED,
        PurchaseOrderStatus.ON_HOLD,
    },
    PurchaseOrderStatus.SHIPPED: {PurchaseOrderStatus.DELIVERED, PurchaseOrderStatus.ON_HOLD},
    PurchaseOrderStatus.DELIVERED: {PurchaseOrderStatus.RECEIVED},
    PurchaseOrderStatus.RECEIVED: {PurchaseOrderStatus.COMPLETED},
    PurchaseOrderStatus.COMPLETED: set(),  # Terminal state
    PurchaseOrderStatus.CANCELLED: set(),  # Terminal state
    PurchaseOrderStatus.ON_HOLD: {
        PurchaseOrderStatus.APPROVED,
        PurchaseOrderStatus.SENT,
        PurchaseOrderStatus.ACKNOWLEDGED,
        PurchaseOrderStatus.IN_PRODUCTION,
        PurchaseOrderStatus.SHIPPED,
        PurchaseOrderStatus.CANCELLED,
    },
    PurchaseOrderStatus.REJECTED: {PurchaseOrderStatus.DRAFT, PurchaseOrderStatus.CANCELLED},
})


STATUS_ENUMS: Mapping[EntityKind, Type[Enum]] = MappingProxyType({
    EntityKind.ORDER: OrderStatus,
    EntityKind.ORDER_ITEM: OrderItemStatus,
    EntityKind.WORK_ORDER: WorkOrderStatus,
    EntityKind.DESIGN_JOB: DesignJobStatus,
    EntityKind.PURCHASE_ORDER: PurchaseOrderStatus,
})

TRANSITION_TABLES: Mapping[EntityKind, Mapping] = MappingProxyType({
    EntityKind.ORDER: ORDER_TRANSITIONS,
    EntityKind.ORDER_ITEM: ORDER_ITEM_TRANSITIONS,
    EntityKind.WORK_ORDER: WORK_ORDER_TRANSITIONS,
    EntityKind.DESIGN_JOB: DESIGN_JOB_TRANSITIONS,
    EntityKind.PURCHASE_ORDER: PURCHASE_ORDER_TRANSITIONS,
})


def _raw(status: Optional[StatusValue]) -> Optional[str]:
    if isinstance(status, Enum):
        return status.value
    return status


def parse_status(kind: EntityKind, status: Optional[StatusValue]) -> Optional[Enum]:
    """Coerce a raw status string into the kind's enum.

    Returns None for values that are not statuses of this kind.
    """
    enum_cls = STATUS_ENUMS.get(kind)
    if enum_cls is None or status is None:
        return None
    try:
        return enum_cls(_raw(status))
    except ValueError:
        return None


def get_transition_table(kind: EntityKind) -> Mapping:
    """Return the transition table for an entity kind.

    Raises:
        UnknownEntityKindError: If the kind has no status lifecycle
    """
    try:
        return TRANSITION_TABLES[kind]
    except KeyError:
        raise UnknownEntityKindError(f"Entity kind '{_raw(kind)}' has no status lifecycle")


def is_valid_transition(
    kind: EntityKind,
    from_status: Optional[StatusValue],
    to_status: Optional[StatusValue]
) -> bool:
    """Check whether ``from_status → to_status`` is a legal one-step move.

    Self-transitions are always valid. Unknown statuses (and kinds without a
    lifecycle) have no declared successors, so the function is total and
    never raises.

    Example:
        >>> is_valid_transition(EntityKind.ORDER, "draft", "pending")
        True
        >>> is_valid_transition(EntityKind.ORDER, "draft", "shipped")
        False
    """
    if from_status is not None and _raw(from_status) == _raw(to_status):
        return True

    table = TRANSITION_TABLES.get(kind)
    source = parse_status(kind, from_status)
    target = parse_status(kind, to_status)
    if table is None or source is None or target is None:
        return False

    return target in table.get(source, frozenset())


def get_allowed_transitions(kind: EntityKind, status: Optional[StatusValue]) -> list[Enum]:
    """Get allowed next statuses, in enum declaration order.

    Args:
        kind: Entity kind
        status: Current status

    Returns:
        List of statuses reachable in one step (empty for terminal or unknown)
    """
    table = get_transition_table(kind)
    source = parse_status(kind, status)
    if source is None:
        return []
    targets = table.get(source, frozenset())
    return [member for member in STATUS_ENUMS[kind] if member in targets]


def is_terminal(kind: EntityKind, status: StatusValue) -> bool:
    """True if the status is declared and has no outgoing transitions."""
    source = parse_status(kind, status)
    if source is None:
        return False
    return not get_transition_table(kind).get(source)


def validate_transition(
    kind: EntityKind,
    from_status: StatusValue,
    to_status: StatusValue
) -> None:
    """Validate that a transition is allowed.

    Raises:
        StateTransitionError: If the transition is not allowed
    """
    if not is_valid_transition(kind, from_status, to_status):
        allowed = [s.value for s in get_allowed_transitions(kind, from_status)]
        raise StateTransitionError(
            f"Invalid {_raw(kind)} transition: {_raw(from_status)} -> {_raw(to_status)}. "
            f"Allowed transitions from {_raw(from_status)}: {allowed}"
        )
