"""Order business rules.

Rules implemented:
- INVALID_CUSTOMER_ORG: customer must belong to the order's organization
- INVALID_TOTAL_CALCULATION: totalAmount must equal Σ(quantity × priceSnapshot)
- DUE_DATE_TOO_SOON / DUE_DATE_TOO_FAR: due date between 1 and 365 days out
- LOW_PROFIT_MARGIN: revenue estimate below 10% of total
- HIGH_QUANTITY_WARNING: item quantity above 1000
"""

from datetime import timedelta
from decimal import Decimal

from ..models import EntityKind, EvaluationContext, Violation, ViolationCode
from ..payloads import OrderPayload, as_utc
from .base import RuleEvaluator


TOTAL_TOLERANCE = Decimal("0.01")
MIN_DUE_DAYS = 1
MAX_DUE_DAYS = 365
MIN_PROFIT_MARGIN_PCT = Decimal("10")
HIGH_QUANTITY_THRESHOLD = Decimal("1000")


async def validate_customer_org(order: OrderPayload, context: EvaluationContext) -> list[Violation]:
    """Customer referenced by the order must belong to the order's org."""
    if not (order.customer_id and order.org_id):
        return []

    customer = await context.data.get_customer(order.customer_id)
    if customer is None or customer.org_id != order.org_id:
        return [Violation.error(
            "customerId",
            "Customer does not belong to this organization",
            ViolationCode.INVALID_CUSTOMER_ORG,
        )]
    return []


def calculate_order_total(order: OrderPayload) -> Decimal:
    """Sum quantity × priceSnapshot over items; missing values count as 0"""
    return sum(
        ((item.quantity or Decimal(0)) * (item.price_snapshot or Decimal(0)) for item in order.items or []),
        Decimal(0),
    )


async def validate_total_calculation(order: OrderPayload, context: EvaluationContext) -> list[Violation]:
    """Stated total must match the item sum within a cent."""
    if order.items is None or order.total_amount is None:
        return []

    calculated = calculate_order_total(order)
    if abs(order.total_amount - calculated) > TOTAL_TOLERANCE:
        return [Violation.error(
            "totalAmount",
            f"Total amount {order.total_amount} does not match calculated total {calculated:.2f}",
            ViolationCode.INVALID_TOTAL_CALCULATION,
        )]
    return []


async def validate_due_date(order: OrderPayload, context: EvaluationContext) -> list[Violation]:
    """Due date must be at least one day out; over a year is flagged."""
    if order.due_date is None:
        return []

    days_until_due = (as_utc(order.due_date) - context.now) / timedelta(days=1)

    if days_until_due < MIN_DUE_DAYS:
        return [Violation.error(
            "dueDate",
            "Due date must be at least 1 day in the future",
            ViolationCode.DUE_DATE_TOO_SOON,
        )]
    if days_until_due > MAX_DUE_DAYS:
        return [Violation.warning(
            "dueDate",
            "Due date cannot be more than 1 year in the future",
            ViolationCode.DUE_DATE_TOO_FAR,
        )]
    return []


async def validate_profit_margin(order: OrderPayload, context: EvaluationContext) -> list[Violation]:
    if order.revenue_estimate is None or not order.total_amount:
        return []

    margin_pct = order.revenue_estimate / order.total_amount * 100
    if margin_pct < MIN_PROFIT_MARGIN_PCT:
        return [Violation.warning(
            "revenueEstimate",
            "Profit margin is below 10% - please review pricing",
            ViolationCode.LOW_PROFIT_MARGIN,
        )]
    return []


async def validate_item_quantities(order: OrderPayload, context: EvaluationContext) -> list[Violation]:
    violations = []
    for index, item in enumerate(order.items or []):
        if item.quantity is not None and item.quantity > HIGH_QUANTITY_THRESHOLD:
            violations.append(Violation.warning(
                f"items[{index}].quantity",
                f"Quantity {item.quantity} is unusually high - please verify",
                ViolationCode.HIGH_QUANTITY_WARNING,
            ))
    return violations


class OrderRuleEvaluator(RuleEvaluator):
    """Business rules for order creation and update payloads."""

    kind = EntityKind.ORDER
    payload_model = OrderPayload

    def checks(self):
        return (
            ("customer_org", validate_customer_org),
            ("total_calculation", validate_total_calculation),
            ("due_date", validate_due_date),
            ("profit_margin", validate_profit_margin),
            ("item_quantities", validate_item_quantities),
        )
