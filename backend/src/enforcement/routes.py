"""Static table of governed routes.

Each entry binds an HTTP method and a Starlette-style path to the evaluator
for one entity kind. Status routes use the kind's transition evaluator and
take the entity id from a path parameter.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Optional

from starlette.routing import compile_path

from config import Settings, get_settings
from domain.governance.models import DEFAULT_POLICY, EnforcementPolicy, EntityKind
from domain.governance.registry import get_payload_evaluator, get_transition_evaluator
from domain.governance.rules import RuleEvaluator


@dataclass(frozen=True)
class GovernedRoute:
    """One governed endpoint.

    Attributes:
        method: HTTP method (upper case)
        path: Starlette path template, e.g. ``/api/v1/orders/{order_id}/status``
        kind: Entity kind whose rules apply
        transition: Evaluate as a status change instead of a payload
        entity_id_param: Path parameter holding the addressed entity's id
        policy: Blocking policy for this route
    """
    method: str
    path: str
    kind: EntityKind
    transition: bool = False
    entity_id_param: Optional[str] = None
    policy: EnforcementPolicy = DEFAULT_POLICY
    _regex: re.Pattern = field(init=False, repr=False, compare=False)
    _convertors: dict = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        regex, _, convertors = compile_path(self.path)
        object.__setattr__(self, "method", self.method.upper())
        object.__setattr__(self, "_regex", regex)
        object.__setattr__(self, "_convertors", convertors)
        if self.transition and not self.entity_id_param:
            raise ValueError(f"Status route {self.path} needs an entity_id_param")

    @property
    def key(self) -> str:
        return f"{self.method} {self.path}"

    @property
    def evaluator(self) -> RuleEvaluator:
        if self.transition:
            return get_transition_evaluator(self.kind)
        return get_payload_evaluator(self.kind)

    def match(self, method: str, path: str) -> Optional[dict[str, Any]]:
        """Return converted path parameters if this route matches, else None."""
        if method.upper() != self.method:
            return None
        found = self._regex.match(path)
        if found is None:
            return None
        return {
            name: self._convertors[name].convert(value)
            for name, value in found.groupdict().items()
        }


def policy_from_settings(settings: Optional[Settings] = None) -> EnforcementPolicy:
    settings = settings or get_settings()
    return EnforcementPolicy(
        block_on_errors=settings.GOVERNANCE_BLOCK_ON_ERRORS,
        block_on_warnings=settings.GOVERNANCE_BLOCK_ON_WARNINGS,
    )


def default_routes(policy: Optional[EnforcementPolicy] = None) -> tuple[GovernedRoute, ...]:
    """Build the governed route table.

    Args:
        policy: Blocking policy for every route (defaults to settings)

    Returns:
        Routes in match order
    """
    policy = policy or policy_from_settings()

    def route(method, path, kind, transition=False, entity_id_param=None):
        return GovernedRoute(
            method=method,
            path=path,
            kind=kind,
            transition=transition,
            entity_id_param=entity_id_param,
            policy=policy,
        )

    return (
        # Orders
        route("POST", "/api/v1/orders", EntityKind.ORDER),
        route("PUT", "/api/v1/orders/{order_id}", EntityKind.ORDER, entity_id_param="order_id"),
        route("PATCH", "/api/v1/orders/{order_id}/status", EntityKind.ORDER, True, "order_id"),
        route("PATCH", "/api/v1/order-items/{order_item_id}/status", EntityKind.ORDER_ITEM, True, "order_item_id"),

        # Design
        route("POST", "/api/v1/design-jobs", EntityKind.DESIGN_JOB),
        route("PATCH", "/api/v1/design-jobs/{design_job_id}/status", EntityKind.DESIGN_JOB, True, "design_job_id"),

        # Manufacturing
        route("POST", "/api/v1/work-orders", EntityKind.WORK_ORDER),
        route("PATCH", "/api/v1/work-orders/{work_order_id}/status", EntityKind.WORK_ORDER, True, "work_order_id"),

        # Purchasing and inventory
        route("POST", "/api/v1/purchase-orders", EntityKind.PURCHASE_ORDER),
        route(
            "PATCH", "/api/v1/purchase-orders/{purchase_order_id}/status",
            EntityKind.PURCHASE_ORDER, True, "purchase_order_id"
        ),
        route("POST", "/api/v1/inventory", EntityKind.INVENTORY),
        route("PATCH", "/api/v1/inventory/{inventory_id}", EntityKind.INVENTORY, entity_id_param="inventory_id"),
    )
