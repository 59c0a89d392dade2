"""Business rule evaluators, one per entity kind.

Each module exposes discrete async check functions plus the evaluator class
that runs them in a fixed order.
"""

from .base import RuleEvaluator
from .order_rules import OrderRuleEvaluator
from .design_job_rules import DesignJobRuleEvaluator
from .work_order_rules import WorkOrderRuleEvaluator
from .purchase_order_rules import PurchaseOrderRuleEvaluator
from .inventory_rules import InventoryRuleEvaluator
from .transition_rules import ORDER_TRANSITION_GUARDS, StatusTransitionEvaluator

__all__ = [
    "RuleEvaluator",
    "OrderRuleEvaluator",
    "DesignJobRuleEvaluator",
    "WorkOrderRuleEvaluator",
    "PurchaseOrderRuleEvaluator",
    "InventoryRuleEvaluator",
    "StatusTransitionEvaluator",
    "ORDER_TRANSITION_GUARDS",
]
