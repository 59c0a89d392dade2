"""Purchase order business rules.

Rules implemented:
- INACTIVE_SUPPLIER: supplier must exist and be active
- APPROVAL_REQUIRED: total above the approval threshold (default 1000)
- BELOW_MOQ: item quantity below the material's minimum order quantity
- INVALID_DELIVERY_DATE / SHORT_LEAD_TIME: delivery at least 1 day, ideally 7, after order date
"""

from datetime import timedelta
from decimal import Decimal

from ..models import EntityKind, EvaluationContext, Violation, ViolationCode
from ..payloads import PurchaseOrderPayload, as_utc
from .base import RuleEvaluator


DEFAULT_APPROVAL_THRESHOLD = Decimal("1000")
MIN_LEAD_TIME = timedelta(days=1)
SHORT_LEAD_TIME = timedelta(days=7)


async def validate_supplier(po: PurchaseOrderPayload, context: EvaluationContext) -> list[Violation]:
    if not po.supplier_id:
        return []

    supplier = await context.data.get_manufacturer(po.supplier_id)
    if supplier is None or not supplier.is_active:
        return [Violation.error(
            "supplierId",
            "Supplier is not active or not found",
            ViolationCode.INACTIVE_SUPPLIER,
        )]
    return []


async def validate_approval_threshold(po: PurchaseOrderPayload, context: EvaluationContext) -> list[Violation]:
    if po.total_amount is None:
        return []

    threshold = po.approval_threshold or DEFAULT_APPROVAL_THRESHOLD
    if po.total_amount > threshold:
        return [Violation.warning(
            "totalAmount",
            "Purchase order requires approval due to amount",
            ViolationCode.APPROVAL_REQUIRED,
        )]
    return []


async def validate_minimum_order_quantities(po: PurchaseOrderPayload, context: EvaluationContext) -> list[Violation]:
    violations = []
    for index, item in enumerate(po.items or []):
        if not item.material_id or item.quantity is None:
            continue

        material = await context.data.get_material(item.material_id)
        if material is not None and material.moq and item.quantity < material.moq:
            violations.append(Violation.warning(
                f"items[{index}].quantity",
                f"Quantity {item.quantity} is below minimum order quantity {material.moq}",
                ViolationCode.BELOW_MOQ,
            ))
    return violations


async def validate_delivery_date(po: PurchaseOrderPayload, context: EvaluationContext) -> list[Violation]:
    if po.expected_delivery_date is None or po.order_date is None:
        return []

    lead_time = as_utc(po.expected_delivery_date) - as_utc(po.order_date)
    if lead_time < MIN_LEAD_TIME:
        return [Violation.error(
            "expectedDeliveryDate",
            "Expected delivery date must be after order date",
            ViolationCode.INVALID_DELIVERY_DATE,
        )]
    if lead_time < SHORT_LEAD_TIME:
        return [Violation.warning(
            "expectedDeliveryDate",
            "Very short lead time - confirm with supplier",
            ViolationCode.SHORT_LEAD_TIME,
        )]
    return []


class PurchaseOrderRuleEvaluator(RuleEvaluator):
    """Business rules for purchase order payloads."""

    kind = EntityKind.PURCHASE_ORDER
    payload_model = PurchaseOrderPayload
    system_error_message = "Unable to validate purchase order business rules"

    def checks(self):
        return (
            ("supplier", validate_supplier),
            ("approval_threshold", validate_approval_threshold),
            ("minimum_order_quantities", validate_minimum_order_quantities),
            ("delivery_date", validate_delivery_date),
        )
