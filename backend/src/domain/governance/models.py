"""Governance domain models: violations, evaluation context, enforcement results."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Any, Mapping, Optional

if TYPE_CHECKING:
    from .port import GovernanceDataPort


class EntityKind(str, Enum):
    """Entity kinds governed by the lifecycle engine."""
    ORDER = "order"
    ORDER_ITEM = "order_item"
    WORK_ORDER = "work_order"
    DESIGN_JOB = "design_job"
    PURCHASE_ORDER = "purchase_order"
    INVENTORY = "inventory"


class ViolationSeverity(str, Enum):
    """Severity of a business rule violation.

    ERROR violations block under the default policy, WARNING violations are
    advisory.
    """
    ERROR = "error"
    WARNING = "warning"


class ViolationCode(str, Enum):
    """Codes emitted by the rule evaluators."""
    # Order
    INVALID_CUSTOMER_ORG = "INVALID_CUSTOMER_ORG"
    INVALID_TOTAL_CALCULATION = "INVALID_TOTAL_CALCULATION"
    DUE_DATE_TOO_SOON = "DUE_DATE_TOO_SOON"
    DUE_DATE_TOO_FAR = "DUE_DATE_TOO_FAR"
    LOW_PROFIT_MARGIN = "LOW_PROFIT_MARGIN"
    HIGH_QUANTITY_WARNING = "HIGH_QUANTITY_WARNING"

    # Status transitions
    INVALID_STATUS_TRANSITION = "INVALID_STATUS_TRANSITION"
    STATUS_CODE_REQUIRED = "STATUS_CODE_REQUIRED"
    ENTITY_NOT_FOUND = "ENTITY_NOT_FOUND"
    INCOMPLETE_ITEMS_CANNOT_SHIP = "INCOMPLETE_ITEMS_CANNOT_SHIP"
    PAYMENT_VERIFICATION_REQUIRED = "PAYMENT_VERIFICATION_REQUIRED"

    # Design job
    INVALID_ORDER_ITEM_ORG = "INVALID_ORDER_ITEM_ORG"
    TIGHT_DEADLINE_WARNING = "TIGHT_DEADLINE_WARNING"
    HIGH_DESIGNER_WORKLOAD = "HIGH_DESIGNER_WORKLOAD"

    # Work order
    ORDER_ITEM_NOT_FOUND = "ORDER_ITEM_NOT_FOUND"
    DESIGN_NOT_APPROVED = "DESIGN_NOT_APPROVED"
    HIGH_MANUFACTURER_WORKLOAD = "HIGH_MANUFACTURER_WORKLOAD"
    INSUFFICIENT_MANUFACTURING_TIME = "INSUFFICIENT_MANUFACTURING_TIME"

    # Purchase order
    INACTIVE_SUPPLIER = "INACTIVE_SUPPLIER"
    APPROVAL_REQUIRED = "APPROVAL_REQUIRED"
    BELOW_MOQ = "BELOW_MOQ"
    INVALID_DELIVERY_DATE = "INVALID_DELIVERY_DATE"
    SHORT_LEAD_TIME = "SHORT_LEAD_TIME"

    # Inventory
    MATERIAL_NOT_FOUND = "MATERIAL_NOT_FOUND"
    NEGATIVE_INVENTORY = "NEGATIVE_INVENTORY"
    LOW_STOCK_WARNING = "LOW_STOCK_WARNING"

    # System
    VALIDATION_SYSTEM_ERROR = "VALIDATION_SYSTEM_ERROR"


@dataclass(frozen=True)
class Violation:
    """A single business rule check failure.

    Value object: never mutated after creation. Lists of violations carry no
    ordering by importance, consumers filter on severity.
    """
    field: str
    message: str
    code: str
    severity: ViolationSeverity

    @classmethod
    def error(cls, field: str, message: str, code: ViolationCode) -> "Violation":
        return cls(field=field, message=message, code=code.value, severity=ViolationSeverity.ERROR)

    @classmethod
    def warning(cls, field: str, message: str, code: ViolationCode) -> "Violation":
        return cls(field=field, message=message, code=code.value, severity=ViolationSeverity.WARNING)

    @property
    def is_error(self) -> bool:
        return self.severity is ViolationSeverity.ERROR

    def to_dict(self) -> dict[str, str]:
        """Convert to the JSON shape used in headers and error bodies"""
        return {
            "field": self.field,
            "message": self.message,
            "code": self.code,
            "severity": self.severity.value,
        }


@dataclass(frozen=True)
class Actor:
    """Authenticated caller attached to the request upstream of the governor."""
    user_id: str
    org_id: Optional[str] = None
    role: Optional[str] = None
    email: Optional[str] = None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class EvaluationContext:
    """Read-only view handed to a rule evaluator.

    Contains the candidate payload (partial or full), the actor, and the
    read-only data-access port. ``entity_id`` is set for requests addressing
    an existing entity (status changes). ``now`` is the evaluation clock.
    """
    payload: Mapping[str, Any]
    data: "GovernanceDataPort"
    actor: Optional[Actor] = None
    entity_id: Optional[str] = None
    now: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class AggregatedViolations:
    """Violations partitioned by severity, input order preserved."""
    errors: tuple[Violation, ...] = ()
    warnings: tuple[Violation, ...] = ()


@dataclass(frozen=True)
class EnforcementPolicy:
    """Blocking policy applied to aggregated violations."""
    block_on_errors: bool = True
    block_on_warnings: bool = False


DEFAULT_POLICY = EnforcementPolicy()


@dataclass(frozen=True)
class EnforcementResult:
    """Outcome of one enforcement decision.

    Built fresh per request and attached to ``request.state`` for audit
    logging. Never cached.
    """
    errors: tuple[Violation, ...]
    warnings: tuple[Violation, ...]
    blocked: bool
    blocked_by: Optional[ViolationSeverity] = None

    @property
    def violations(self) -> list[Violation]:
        return [*self.errors, *self.warnings]

    def to_dict(self) -> dict[str, Any]:
        return {
            "blocked": self.blocked,
            "errors": [v.to_dict() for v in self.errors],
            "warnings": [v.to_dict() for v in self.warnings],
        }
